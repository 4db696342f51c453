"""
Tracing hooks for the matcher runtime.

A Tracer is handed to Peg and receives one call per rule entry, rule exit
and token comparison.  The base class ignores everything, so tracing
costs a method call when it is not wanted.
"""

from __future__ import annotations

import sys
from typing import IO, Any, NamedTuple, Optional

from pegish.tokens import token_text


class TraceEvent(NamedTuple):
    kind: str  # "enter", "exit" or "token"
    rule: Optional[str]
    position: int
    detail: Any


class Tracer:
    def enter(self, rule: str, position: int) -> None:
        pass

    def exit(self, rule: str, position: int, matched: bool) -> None:
        pass

    def token(
        self, expected: Any, position: int, token: Any, matched: bool
    ) -> None:
        """
        `token` is None when the comparison ran into the end of input."""
        pass


class RecordingTracer(Tracer):
    """Keeps every event in `events`."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []
        self._rules: list[str] = []

    def enter(self, rule: str, position: int) -> None:
        self._rules.append(rule)
        self.events.append(TraceEvent("enter", rule, position, None))

    def exit(self, rule: str, position: int, matched: bool) -> None:
        self._rules.pop()
        self.events.append(TraceEvent("exit", rule, position, matched))

    def token(
        self, expected: Any, position: int, token: Any, matched: bool
    ) -> None:
        rule = self._rules[-1] if self._rules else None
        self.events.append(
            TraceEvent("token", rule, position, (expected, token, matched))
        )

    def of_kind(self, kind: str) -> list[TraceEvent]:
        return [event for event in self.events if event.kind == kind]


class PrintTracer(Tracer):
    """
    Prints the trace as it happens, indented by rule depth:

        ENTER greeting @0
          INPUT: "hello" <- 'hello'
             --> accept
        EXIT greeting @3 --> accept
    """

    def __init__(self, file: Optional[IO[str]] = None) -> None:
        self._file = file
        self._depth = 0

    def _print(self, text: str) -> None:
        f = self._file if self._file is not None else sys.stdout
        print("%s%s" % ("  " * self._depth, text), file=f)

    def enter(self, rule: str, position: int) -> None:
        self._print("ENTER %s @%d" % (rule, position))
        self._depth += 1

    def exit(self, rule: str, position: int, matched: bool) -> None:
        self._depth -= 1
        self._print(
            "EXIT %s @%d --> %s"
            % (rule, position, "accept" if matched else "reject")
        )

    def token(
        self, expected: Any, position: int, token: Any, matched: bool
    ) -> None:
        if token is None:
            self._print("INPUT: %r <- <end of input>" % (expected,))
        else:
            self._print("INPUT: %r <- %r" % (expected, token_text(token)))
        self._print("   --> %s" % ("accept" if matched else "reject"))
