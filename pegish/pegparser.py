# ============================================================================
# Copyright (c) 2007 Jason Evans <jasone@canonware.com>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# ============================================================================
"""
The matcher runtime.  Peg takes a collected Grammar and matches its rules
against a Cursor over subject tokens:

  * A rule tries its alternatives in declaration order and the first one
    that matches wins (ordered choice, not longest match).
  * Within an alternative, items are matched in order and the first item
    that fails abandons the alternative.
  * A failed alternative or group resets the cursor to the mark taken
    before it, so a failure never leaves the cursor advanced.
  * A rule that succeeds returns an AstNode tagged with its name; a rule
    whose alternatives all fail returns a ParserError.

Peg holds no state between calls, so a single instance may serve any
number of parses, including concurrent ones, each with its own Cursor.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from pegish.ast import AstNode
from pegish.cursor import Cursor
from pegish.errors import ParsingError, SpecError
from pegish.flatstream import FlatStream
from pegish.grammar import (
    NONE,
    ONE_OR_MORE,
    OPTIONAL,
    Alternative,
    Grammar,
    GroupItem,
    MatchItem,
    NonTerminal,
    Terminal,
    TypedToken,
)
from pegish.interfaces import Parser
from pegish.report import ParserError
from pegish.trace import Tracer


MatchResult = Union[AstNode, ParserError]


class Attempt:
    """
    Failure bookkeeping for one rule invocation: the furthest position any
    of its items failed at, the item and alternative that got there, and
    the errors of the sub-rules that failed along the way."""

    __slots__ = ("furthest", "expected", "alternative", "current", "failures")

    def __init__(self, position: int) -> None:
        self.furthest = position
        self.expected: Optional[MatchItem] = None
        self.alternative = 0
        self.current = 0
        self.failures: list[ParserError] = []

    def fail(
        self,
        position: int,
        item: MatchItem,
        error: Optional[ParserError] = None,
    ) -> None:
        if error is not None:
            self.failures.append(error)
            position = max(position, error.position)
        if self.expected is None or position > self.furthest:
            self.furthest = position
            self.expected = item
            self.alternative = self.current


class Peg(Parser):
    """
    Recursive-descent matcher for a Grammar.

    grammar : The collected Grammar.

    tracer : A pegish.trace.Tracer receiving rule and token events.  The
             default ignores them; PrintTracer prints them.

    context_radius : Number of tokens on either side of a failure point
                     kept in ParserError.context.
    """

    def __init__(
        self,
        grammar: Grammar,
        tracer: Optional[Tracer] = None,
        context_radius: int = 3,
    ) -> None:
        assert context_radius >= 0
        self._grammar = grammar
        self._tracer = tracer if tracer is not None else Tracer()
        self._radius = context_radius
        # Rule name -> alternatives; the only table consulted while
        # matching.
        self._rules: dict[str, tuple[Alternative, ...]] = {
            name: rule.alternatives for name, rule in grammar.rules.items()
        }

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def tracer(self) -> Tracer:
        return self._tracer

    def matcher(self, name: str) -> Callable[[Cursor], MatchResult]:
        """Return a function matching rule `name` at a cursor."""
        if name not in self._rules:
            raise SpecError("Undeclared rule: %s" % name)

        def match(cursor: Cursor) -> MatchResult:
            return self.match_rule(name, cursor)

        match.__name__ = "match_%s" % name
        return match

    def parse(
        self,
        tokens: Any,
        start: Optional[str] = None,
        complete: bool = False,
    ) -> MatchResult:
        """
        tokens : Subject input: tree-shaped tokens (Groups are flattened),
                 a FlatStream, or a Cursor (which is advanced in place).

        start : Rule to match; the grammar's first rule by default.

        complete : If true, input left over after the start rule matched
                   is reported as a ParserError."""
        if start is None:
            start = self._grammar.start
        cursor = _as_cursor(tokens)
        try:
            result = self.match_rule(start, cursor)
        except RecursionError as e:
            raise ParsingError(
                "Recursion limit exceeded while matching rule %s; the "
                "grammar is left-recursive or the input nests too deeply"
                % start
            ) from e
        if complete and isinstance(result, AstNode) and not cursor.at_end():
            return self._error(
                start, cursor, cursor.mark(), "end of input", 0, ()
            )
        return result

    def match_rule(self, name: str, cursor: Cursor) -> MatchResult:
        try:
            alternatives = self._rules[name]
        except KeyError:
            raise SpecError("Undeclared rule: %s" % name) from None

        entry = cursor.mark()
        self._tracer.enter(name, entry)
        attempt = Attempt(entry)
        for index, alternative in enumerate(alternatives):
            attempt.current = index
            children = self._match_sequence(alternative, cursor, attempt)
            if children is not None:
                self._tracer.exit(name, cursor.mark(), True)
                return AstNode(name, children)
            cursor.reset(entry)
        self._tracer.exit(name, entry, False)

        expected = None
        if attempt.expected is not None:
            expected = repr(attempt.expected)
        return self._error(
            name,
            cursor,
            attempt.furthest,
            expected,
            attempt.alternative,
            attempt.failures,
        )

    def expect(
        self,
        item: MatchItem,
        cursor: Cursor,
        attempt: Optional[Attempt] = None,
    ) -> Optional[list[Any]]:
        """
        Match a single item at the cursor.  Returns the children it
        contributes (one AstNode for a rule, one token for a terminal or
        typed token, any number for a group), or None if it fails.

        A failed terminal or typed-token match leaves the cursor past the
        token it rejected; restoring it is up to the enclosing alternative.
        """
        if attempt is None:
            attempt = Attempt(cursor.mark())

        if type(item) is NonTerminal:
            result = self.match_rule(item.name, cursor)
            if isinstance(result, AstNode):
                return [result]
            attempt.fail(cursor.mark(), item, result)
            return None
        elif type(item) is Terminal:
            return self._expect_token(item, cursor, attempt)
        elif type(item) is TypedToken:
            return self._expect_token(item, cursor, attempt)
        elif type(item) is GroupItem:
            return self._expect_group(item, cursor, attempt)
        else:
            raise AssertionError("unknown match item: %r" % (item,))

    def _expect_token(
        self,
        item: Union[Terminal, TypedToken],
        cursor: Cursor,
        attempt: Attempt,
    ) -> Optional[list[Any]]:
        position = cursor.mark()
        if cursor.at_end():
            self._tracer.token(item, position, None, False)
            attempt.fail(position, item)
            return None
        token = cursor.advance()
        matched = item.matches(token)
        self._tracer.token(item, position, token, matched)
        if matched:
            return [token]
        attempt.fail(position, item)
        return None

    def _expect_group(
        self, item: GroupItem, cursor: Cursor, attempt: Attempt
    ) -> Optional[list[Any]]:
        if item.modifier == NONE:
            return self._match_choice(item.alternatives, cursor, attempt)
        if item.modifier == OPTIONAL:
            children = self._match_choice(item.alternatives, cursor, attempt)
            return [] if children is None else children

        # Repetition.  Every iteration is all-or-nothing; the first one
        # that fails ends the loop with the cursor where it started.
        repeated: list[Any] = []
        iterations = 0
        while True:
            start = cursor.mark()
            matched = self._match_choice(item.alternatives, cursor, attempt)
            if matched is None:
                break
            iterations += 1
            repeated.extend(matched)
            if cursor.mark() == start:
                # No progress; another iteration would match the same.
                break
        if item.modifier == ONE_OR_MORE and iterations == 0:
            return None
        return repeated

    def _match_choice(
        self,
        alternatives: tuple[Alternative, ...],
        cursor: Cursor,
        attempt: Attempt,
    ) -> Optional[list[Any]]:
        start = cursor.mark()
        for alternative in alternatives:
            children = self._match_sequence(alternative, cursor, attempt)
            if children is not None:
                return children
            cursor.reset(start)
        return None

    def _match_sequence(
        self, alternative: Alternative, cursor: Cursor, attempt: Attempt
    ) -> Optional[list[Any]]:
        children: list[Any] = []
        for item in alternative.items:
            matched = self.expect(item, cursor, attempt)
            if matched is None:
                return None
            children.extend(matched)
        return children

    def _error(
        self,
        name: str,
        cursor: Cursor,
        position: int,
        expected: Optional[str],
        alternative: int,
        children: Any,
    ) -> ParserError:
        return ParserError(
            name,
            position,
            cursor.tokens,
            cursor.bound,
            expected,
            alternative,
            children,
            self._radius,
            self._grammar.filepath,
        )


def _as_cursor(tokens: Any) -> Cursor:
    if isinstance(tokens, Cursor):
        return tokens
    if isinstance(tokens, FlatStream):
        return Cursor(tokens.tokens)
    return Cursor(FlatStream.from_tree(tokens).tokens)
