"""Parse tree to descriptor construction."""
from derivegen.semantics.ast_builder.builder import ASTBuilder

__all__ = ["ASTBuilder"]
