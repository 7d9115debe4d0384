"""Lark-based reader for compiled CSS."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError

from sassinline.errors import CssParseError
from sassinline.stylesheet.model import AtRule, Declaration, Node, Rule, Stylesheet

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"
_AT_KEYWORD = re.compile(r"@([-\w]+)\s*(.*)", re.DOTALL)


def _declaration(token: Token) -> Declaration | None:
    """Split a prelude on its first colon; ``None`` if it is not a declaration."""
    text = str(token)
    colon = text.find(":")
    if colon <= 0:
        return None
    raw_value = text[colon + 1 :]
    value = raw_value.strip()
    start = token.start_pos + colon + 1 + (len(raw_value) - len(raw_value.lstrip()))
    return Declaration(
        property=text[:colon].strip(),
        value=value,
        line=token.line,
        column=token.column,
        start=start,
        end=start + len(value),
    )


def _at_rule(token: Token, children: list[Node] | None) -> AtRule:
    match = _AT_KEYWORD.match(str(token).strip())
    name, params = (match.group(1), match.group(2)) if match else (str(token)[1:], "")
    return AtRule(
        name=name,
        params=params.strip(),
        children=children,
        line=token.line,
        column=token.column,
    )


class CssTransformer(Transformer):  # type: ignore[type-arg]
    """Transform the prelude/block parse tree into the declaration tree."""

    def tail(self, items: list[Token]) -> Node | None:
        return _declaration(items[0])

    def statement(self, items: list[Token]) -> Node | None:
        token = items[0]
        if token.startswith("@"):
            return _at_rule(token, None)
        return _declaration(token)

    def block(self, items: list[Node | None]) -> list[Node]:
        return [item for item in items if item is not None]

    def rule(self, items: list[object]) -> Node:
        token, children = items
        if token.startswith("@"):  # type: ignore[union-attr]
            return _at_rule(token, children)  # type: ignore[arg-type]
        return Rule(
            selector=str(token).strip(),
            children=children,  # type: ignore[arg-type]
            line=token.line,  # type: ignore[union-attr]
            column=token.column,  # type: ignore[union-attr]
        )

    def start(self, items: list[Node | None]) -> Stylesheet:
        return Stylesheet(children=[item for item in items if item is not None])


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def parse_css(source: str) -> Stylesheet:
    """Parse compiled CSS into a :class:`Stylesheet` declaration tree."""
    try:
        tree = _parser().parse(source)
    except LarkError as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise CssParseError(str(e), line=line, column=column) from e
    return CssTransformer().transform(tree)
