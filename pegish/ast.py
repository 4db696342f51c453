"""
The AstNode class is the output of a successful match: a node tagged with
the name of the rule that produced it, whose children are nested AstNodes
and the leaf tokens consumed by terminal and typed-token matches, in match
order.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from mypy_extensions import mypyc_attr

from pegish.tokens import token_text


@mypyc_attr(serializable=True, allow_interpreted_subclasses=True)
class AstNode:
    def __init__(self, tag: str, children: Iterable[Any] = ()) -> None:
        self.tag = tag
        self.children = tuple(children)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, AstNode):
            return NotImplemented
        return self.tag == other.tag and self.children == other.children

    def __repr__(self) -> str:
        return "AstNode(%r, %r)" % (self.tag, list(self.children))

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.children)

    def __getitem__(self, index: int) -> Any:
        return self.children[index]

    def nodes(self) -> list[AstNode]:
        """The child nodes, leaving out leaf tokens."""
        return [c for c in self.children if isinstance(c, AstNode)]

    def tokens(self) -> Iterator[Any]:
        """Iterate over the leaf tokens of the whole subtree, in order."""
        for child in self.children:
            if isinstance(child, AstNode):
                for token in child.tokens():
                    yield token
            else:
                yield child

    def find_all(self, tag: str) -> Iterator[AstNode]:
        """Iterate over this node and its descendants tagged `tag`."""
        if self.tag == tag:
            yield self
        for child in self.children:
            if isinstance(child, AstNode):
                for node in child.find_all(tag):
                    yield node

    def pretty(self, indent: str = "  ") -> str:
        lines: list[str] = []
        self._pretty(lines, 0, indent)
        return "\n".join(lines)

    def _pretty(self, lines: list[str], depth: int, indent: str) -> None:
        lines.append("%s%s" % (indent * depth, self.tag))
        for child in self.children:
            if isinstance(child, AstNode):
                child._pretty(lines, depth + 1, indent)
            else:
                prefix = indent * (depth + 1)
                lines.append("%s%r" % (prefix, token_text(child)))
