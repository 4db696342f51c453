"""
Error reporting for failed matches.

When every alternative of a rule fails, the runtime builds a ParserError
for that rule.  The error records the position of the furthest failure
among its alternatives and the errors of the sub-rules that were tried and
failed on the way, so the errors of one parse form a tree that mirrors the
rule attempts.  The token window and line are only worked out when asked
for.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional, Sequence

from pegish.errors import ParsingError
from pegish.tokens import token_text


def context_window(
    tokens: Sequence[Any],
    position: int,
    radius: int,
    bound: Optional[int] = None,
) -> tuple[Any, ...]:
    """
    The tokens within `radius` of `position` on either side, clipped to
    the input."""
    if bound is None:
        bound = len(tokens)
    start = max(0, position - radius)
    stop = min(bound, position + radius + 1)
    return tuple(tokens[start:stop])


def line_at(
    tokens: Sequence[Any], position: int, bound: Optional[int] = None
) -> Optional[int]:
    """
    The line of the token at `position`, or of the last token when
    `position` is at the end of input.  None when tokens carry no line."""
    if bound is None:
        bound = len(tokens)
    if position < bound:
        token = tokens[position]
    elif bound > 0:
        token = tokens[bound - 1]
    else:
        return None
    return getattr(token, "line", None)


class ParserError(ParsingError):
    """
    Diagnostic for a rule that failed to match.

      rule        : Name of the rule.
      position    : Index of the token where the furthest alternative
                    failed.
      expected    : Rendering of the match item that failed there.
      alternative : Index of that furthest-progressed alternative.
      children    : Errors of the sub-rules tried and failed, in the order
                    they were attempted.
      context     : Tokens around `position`.
      line        : 1-based line of the failing token, if known.

    ParserError is returned by value from Peg.parse() and Peg.match_rule();
    it can be raised by callers that prefer exceptions.
    """

    def __init__(
        self,
        rule: str,
        position: int,
        tokens: Sequence[Any],
        bound: Optional[int] = None,
        expected: Optional[str] = None,
        alternative: int = 0,
        children: Iterable[ParserError] = (),
        radius: int = 3,
        filepath: Optional[str] = None,
    ) -> None:
        super().__init__(rule, position)
        self.rule = rule
        self.position = position
        self.expected = expected
        self.alternative = alternative
        self.children: tuple[ParserError, ...] = tuple(children)
        self.radius = radius
        self.filepath = filepath
        self._tokens = tokens
        self._bound = len(tokens) if bound is None else bound
        self._context: Optional[tuple[Any, ...]] = None

    def __reduce__(self) -> Any:
        return (
            type(self),
            (
                self.rule,
                self.position,
                self._tokens,
                self._bound,
                self.expected,
                self.alternative,
                self.children,
                self.radius,
                self.filepath,
            ),
        )

    @property
    def context(self) -> tuple[Any, ...]:
        if self._context is None:
            self._context = context_window(
                self._tokens, self.position, self.radius, self._bound
            )
        return self._context

    @property
    def line(self) -> Optional[int]:
        return line_at(self._tokens, self.position, self._bound)

    @property
    def token(self) -> Any:
        """The failing token, None at end of input."""
        if self.position < self._bound:
            return self._tokens[self.position]
        return None

    def _where(self) -> str:
        line = self.line
        if self.filepath is not None:
            if line is None:
                return self.filepath
            return "%s:%d" % (self.filepath, line)
        if line is not None:
            return "line %d" % line
        return "token %d" % self.position

    def summary(self) -> str:
        token = self.token
        if token is None:
            found = "end of input"
        else:
            found = repr(token_text(token))
        text = "%s: rule %s failed at %s" % (self._where(), self.rule, found)
        if self.expected is not None:
            text += " (expected %s)" % self.expected
        return text

    __str__ = summary

    def __repr__(self) -> str:
        return "ParserError(rule=%r, position=%d, children=%d)" % (
            self.rule,
            self.position,
            len(self.children),
        )

    def walk(self) -> Iterator[ParserError]:
        """Pre-order iteration over this error and all nested errors."""
        yield self
        for child in self.children:
            for error in child.walk():
                yield error

    def deepest(self) -> ParserError:
        """
        The most specific error in the tree: the one that failed furthest
        into the input, preferring the more deeply nested on ties."""
        best, _ = self._deepest(0)
        return best

    def _deepest(self, depth: int) -> tuple[ParserError, int]:
        best: ParserError = self
        best_depth = depth
        for child in self.children:
            error, error_depth = child._deepest(depth + 1)
            if (error.position, error_depth) > (best.position, best_depth):
                best, best_depth = error, error_depth
        return best, best_depth

    def format_tree(self, indent: str = "  ") -> str:
        """Render the whole attempt tree, one error per line."""
        lines: list[str] = []
        self._format(lines, 0, indent)
        return "\n".join(lines)

    def _format(self, lines: list[str], depth: int, indent: str) -> None:
        window = " ".join(token_text(token) for token in self.context)
        lines.append(
            "%s%s  [alternative %d] near: %s"
            % (indent * depth, self.summary(), self.alternative, window)
        )
        for child in self.children:
            child._format(lines, depth + 1, indent)
