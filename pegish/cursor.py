"""
Backtrackable cursor over a flat token sequence.

The cursor's position is its only state.  Callers take a mark() before an
attempt and reset() to it when the attempt fails, which gives every
alternative and group all-or-nothing semantics.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pegish.errors import EndOfInput
from pegish.tokens import GroupBegin


class Cursor:
    """
    A position over tokens[position:bound].  Copies share the token
    sequence and only duplicate the position.
    """

    def __init__(
        self,
        tokens: Sequence[Any],
        position: int = 0,
        bound: Optional[int] = None,
    ) -> None:
        if bound is None:
            bound = len(tokens)
        assert 0 <= position <= bound <= len(tokens)
        self._tokens = tokens
        self._position = position
        self._bound = bound

    @property
    def tokens(self) -> Sequence[Any]:
        return self._tokens

    @property
    def position(self) -> int:
        return self._position

    @property
    def bound(self) -> int:
        return self._bound

    def __repr__(self) -> str:
        return "<Cursor %d of %d>" % (self._position, self._bound)

    def mark(self) -> int:
        return self._position

    def reset(self, position: int) -> None:
        assert 0 <= position <= self._bound
        self._position = position

    def at_end(self) -> bool:
        return self._position >= self._bound

    def remaining(self) -> int:
        return self._bound - self._position

    def peek(self) -> Any:
        """Return the current token without advancing."""
        if self._position >= self._bound:
            raise EndOfInput(self._position, self._bound)
        return self._tokens[self._position]

    def advance(self) -> Any:
        """Return the current token and move past it."""
        token = self.peek()
        self._position += 1
        return token

    def copy(self) -> Cursor:
        return Cursor(self._tokens, self._position, self._bound)

    def sub(self, start: int, stop: int) -> Cursor:
        """An independent cursor over tokens[start:stop]."""
        assert 0 <= start <= stop <= self._bound
        return Cursor(self._tokens, start, stop)

    def group(self) -> Cursor:
        """
        Return a cursor over the interior of the group that starts at the
        current position, and advance past the group's end marker."""
        begin = self.peek()
        if not isinstance(begin, GroupBegin):
            raise TypeError("no group at position %d" % self._position)
        interior = Cursor(self._tokens, self._position + 1, begin.end - 1)
        self._position = begin.end
        return interior
