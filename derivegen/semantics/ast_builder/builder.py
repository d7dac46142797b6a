"""ASTBuilder: turns the declaration parse tree into AdtDescriptors.

Delegates to:
- declarations: items, generics, where-clauses, fields, variants
- types: type expressions, paths, bounds, literals
"""
from __future__ import annotations
from typing import List

from lark import Tree

from derivegen.semantics.ast import AdtDescriptor
from derivegen.semantics.ast_builder.declarations import parse_declaration
from derivegen.semantics.ast_builder.utils.tree_navigation import first_tree


class ASTBuilder:
    def build(self, tree: Tree) -> List[AdtDescriptor]:
        """Build one descriptor per item, in source order."""
        assert isinstance(tree, Tree) and tree.data == "start"
        decls: List[AdtDescriptor] = []
        for item in tree.children:
            if not isinstance(item, Tree) or item.data != "item":
                continue
            decl = first_tree(item.children, "enum_def", "struct_def", "union_def")
            if decl is None:
                raise NotImplementedError("item: missing declaration")
            decls.append(parse_declaration(decl))
        return decls
