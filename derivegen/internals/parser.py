"""Lark parser setup for declaration sources and macro invocations."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from lark import Lark, Token, Tree, UnexpectedInput, UnexpectedCharacters
from lark.exceptions import UnexpectedEOF

from derivegen.internals.errors import raise_derive_error
from derivegen.internals.report import Span
from derivegen.semantics.ast import AdtDescriptor
from derivegen.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

# Token shapes of a proc-macro style invocation: `generate_index_type!(FunId)`
INVOCATION_GRAMMAR = r"""
start: _tok*
_tok: NAME | LIFETIME | LITERAL | PUNCT
NAME: /[A-Za-z_][A-Za-z0-9_]*/
LIFETIME: /'[A-Za-z_][A-Za-z0-9_]*/
LITERAL: /"(\\.|[^"\\])*"/ | /\d[\w.]*/
PUNCT: /[^\sA-Za-z0-9_"']/
%import common.WS
%ignore WS
"""


@lru_cache(maxsize=None)
def _declaration_parser() -> Lark:
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="earley",
        lexer="basic",
        propagate_positions=True,
        maybe_placeholders=False,
    )


@lru_cache(maxsize=None)
def _invocation_lexer() -> Lark:
    return Lark(INVOCATION_GRAMMAR, parser="lalr", lexer="basic")


def _error_span(e: UnexpectedInput) -> Span | None:
    line = getattr(e, "line", -1)
    col = getattr(e, "column", -1)
    if line is None or col is None or line < 1:
        return None
    return Span(line, col, line, col)


def improve_parse_error(e: UnexpectedInput) -> str:
    """One-line description of a lark parse error."""
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"
    token = getattr(e, "token", None)
    if token is not None:
        expected = sorted(getattr(e, "expected", None) or getattr(e, "accepts", None) or [])
        hint = f" (expected one of: {', '.join(expected)})" if expected else ""
        return f"unexpected token {str(token)!r}{hint}"
    return str(e).splitlines()[0]


def parse_tree(src: str) -> Tree:
    """Parse declaration source into a raw lark tree.

    Raises:
        DeclarationSyntaxError: If the source is outside the declaration grammar
    """
    try:
        return _declaration_parser().parse(src)
    except UnexpectedInput as e:
        raise_derive_error("DG1401", span=_error_span(e), detail=improve_parse_error(e))


def parse_declarations(src: str, dump_parse: bool = False) -> List[AdtDescriptor]:
    """Parse declaration source into descriptors, in source order."""
    tree = parse_tree(src)
    if dump_parse:
        print(tree.pretty())
    return ASTBuilder().build(tree)


def parse_declaration(src: str) -> AdtDescriptor:
    """Parse a source holding exactly one declaration."""
    decls = parse_declarations(src)
    if len(decls) != 1:
        raise_derive_error("DG1401", detail=f"expected exactly one declaration, found {len(decls)}")
    return decls[0]


def lex_invocation(src: str) -> List[Token]:
    """Split macro invocation arguments into tokens (NAME, LIFETIME, LITERAL, PUNCT)."""
    try:
        return list(_invocation_lexer().lex(src))
    except UnexpectedInput as e:
        raise_derive_error("DG1301", got=improve_parse_error(e))
