"""Declaration tree for compiled CSS: rules, at-rules, and declarations."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union


@dataclass
class Declaration:
    """A ``property: value`` pair with its place in the generated CSS.

    ``line`` and ``column`` (both 1-based) locate the start of the property;
    ``start`` and ``end`` are offsets of the value within the CSS text.
    """

    property: str
    value: str
    line: int
    column: int
    start: int
    end: int


@dataclass
class Rule:
    """A qualified rule: selector prelude plus its body."""

    selector: str
    children: list[Node] = field(default_factory=list)
    line: int = 0
    column: int = 0


@dataclass
class AtRule:
    """An at-rule (``@media``, ``@font-face``, ``@import`` ...); ``children`` is
    ``None`` for statement at-rules that carry no body."""

    name: str
    params: str
    children: list[Node] | None = None
    line: int = 0
    column: int = 0


Node = Union[Declaration, Rule, AtRule]


@dataclass
class Stylesheet:
    children: list[Node] = field(default_factory=list)

    def declarations(self) -> Iterator[Declaration]:
        """Yield every declaration in document order, descending into nested bodies."""
        yield from _walk(self.children)

    def rules(self) -> Iterator[Rule]:
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if isinstance(node, Rule):
                yield node
            if isinstance(node, (Rule, AtRule)) and node.children:
                stack.extend(reversed(node.children))


def _walk(nodes: list[Node]) -> Iterator[Declaration]:
    for node in nodes:
        if isinstance(node, Declaration):
            yield node
        elif node.children:
            yield from _walk(node.children)
