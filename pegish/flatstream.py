"""
Flattening of tree-shaped token input.

A FlatStream is the linear form of nested input: every Group becomes a
GroupBegin marker, the group's own tokens, and a GroupEnd marker.  Each
GroupBegin stores the index just past its GroupEnd, so skipping a whole
group is a single assignment rather than a bracket-counting scan.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from pegish.errors import SpecError
from pegish.tokens import Group, GroupBegin, GroupEnd


class FlatStream:
    def __init__(self, tokens: Iterable[Any] = ()) -> None:
        self.tokens: list[Any] = list(tokens)

    @classmethod
    def from_tree(cls, trees: Iterable[Any]) -> FlatStream:
        """Flatten tree-shaped input.  Leaf tokens are kept as they are."""
        tokens: list[Any] = []
        for tree in trees:
            _flatten(tokens, tree)
        return cls(tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Any:
        return self.tokens[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.tokens)

    def __repr__(self) -> str:
        return "FlatStream(%r)" % (self.tokens,)

    def rebuild(self) -> list[Any]:
        """
        Reconstruct the tree-shaped input by following the stored
        end-indices of the GroupBegin markers."""
        return _rebuild(self.tokens, 0, len(self.tokens))

    def validate(self) -> None:
        """
        Check that every GroupBegin at index i is matched by a GroupEnd of
        the same delimiter at index end - 1, and that groups nest."""
        stack: list[int] = []
        for index, token in enumerate(self.tokens):
            if isinstance(token, GroupBegin):
                if not index < token.end <= len(self.tokens):
                    raise SpecError(
                        "Group at %d has out of range end %d"
                        % (index, token.end)
                    )
                if stack and token.end > self.tokens[stack[-1]].end:
                    raise SpecError(
                        "Group at %d crosses its enclosing group" % index
                    )
                stack.append(index)
            elif isinstance(token, GroupEnd):
                if not stack:
                    raise SpecError("Unmatched group end at %d" % index)
                begin = self.tokens[stack.pop()]
                if begin.end - 1 != index:
                    raise SpecError(
                        "Group end at %d does not match its begin (%d)"
                        % (index, begin.end - 1)
                    )
                if begin.delimiter != token.delimiter:
                    raise SpecError(
                        "Mismatched group delimiters %r and %r at %d"
                        % (begin.delimiter, token.delimiter, index)
                    )
        if stack:
            raise SpecError("Unterminated group at %d" % stack[-1])


def _flatten(tokens: list[Any], tree: Any) -> None:
    if not isinstance(tree, Group):
        tokens.append(tree)
        return
    start = len(tokens)
    # Placeholder until the end index is known.
    tokens.append(None)
    for child in tree.children:
        _flatten(tokens, child)
    tokens.append(GroupEnd(tree.delimiter, tree.end_line))
    tokens[start] = GroupBegin(tree.delimiter, len(tokens), tree.line)


def _rebuild(tokens: list[Any], start: int, stop: int) -> list[Any]:
    out: list[Any] = []
    i = start
    while i < stop:
        token = tokens[i]
        if isinstance(token, GroupBegin):
            end = token.end
            out.append(
                Group(
                    token.delimiter,
                    _rebuild(tokens, i + 1, end - 1),
                    token.line,
                    tokens[end - 1].line,
                )
            )
            i = end
        else:
            out.append(token)
            i += 1
    return out
