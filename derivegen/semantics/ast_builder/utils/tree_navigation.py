"""Tree navigation utilities for traversing Lark parse trees."""
from __future__ import annotations
from typing import Callable, Iterator, List, Optional
from lark import Tree, Token


def first(children: List[object], pred: Callable) -> Optional[object]:
    """Find first child matching predicate."""
    for ch in children:
        if pred(ch):
            return ch
    return None


def first_token(children: List[object], *types: str) -> Optional[Token]:
    """Get first token child whose type is one of `types`."""
    return first(children, lambda c: isinstance(c, Token) and c.type in types)  # type: ignore[return-value]


def first_name(children: List[object]) -> Optional[Token]:
    """Get first NAME token from children."""
    return first_token(children, "NAME")


def first_tree(children: List[object], *data: str) -> Optional[Tree]:
    """Get first Tree child whose data tag is one of `data`."""
    return first(children, lambda c: isinstance(c, Tree) and c.data in data)  # type: ignore[return-value]


def trees(children: List[object], *data: str) -> Iterator[Tree]:
    """Tree children, optionally restricted to the given data tags."""
    for ch in children:
        if isinstance(ch, Tree) and (not data or ch.data in data):
            yield ch


def tokens(children: List[object], *types: str) -> Iterator[Token]:
    """Token children of the given types."""
    for ch in children:
        if isinstance(ch, Token) and ch.type in types:
            yield ch


def first_tree_child(t: Tree) -> Tree:
    """Get first Tree child or raise if missing."""
    ch = next((c for c in t.children if isinstance(c, Tree)), None)
    if ch is None:
        raise NotImplementedError(f"missing operand under '{t.data}'")
    return ch
