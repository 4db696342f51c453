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
This module contains the classes that make up a collected grammar: the
rule table and the match items its alternatives are built from.

A match item is exactly one of Terminal, TypedToken, NonTerminal or
GroupItem.  The runtime dispatches on the concrete class, so the set is
closed; add a new kind here and in Peg.expect together.
"""

from __future__ import annotations

import json
import sys
from typing import IO, Any, Iterable, Iterator, Optional, Sequence

from pegish.errors import SpecError
from pegish.interfaces import SubjectToken
from pegish.tokens import OPENERS, kind_matches, token_kind


# Group modifiers.
NONE = "none"
OPTIONAL = "optional"
ZERO_OR_MORE = "zero_or_more"
ONE_OR_MORE = "one_or_more"

MODIFIER_SYMBOLS = {"*": ZERO_OR_MORE, "+": ONE_OR_MORE, "?": OPTIONAL}
_modifier_suffix = {
    NONE: "",
    OPTIONAL: "?",
    ZERO_OR_MORE: "*",
    ONE_OR_MORE: "+",
}


def group_modifier(delimiter: str, symbol: Optional[str]) -> str:
    """
    Combine a group's delimiter with the modifier symbol that follows it
    (None when absent).  Square and curly groups are optional by
    themselves, so a repetition on them can always match zero times."""
    assert delimiter in OPENERS
    modifier = NONE if symbol is None else MODIFIER_SYMBOLS[symbol]
    if delimiter == "(":
        return modifier
    if modifier in (ZERO_OR_MORE, ONE_OR_MORE):
        return ZERO_OR_MORE
    return OPTIONAL


class MatchItem:
    def _key(self) -> tuple[Any, ...]:
        raise NotImplementedError

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._key())


class Terminal(MatchItem):
    """Matches one token whose lexeme equals `text`."""

    def __init__(self, text: str) -> None:
        self.text = text

    def _key(self) -> tuple[Any, ...]:
        return (self.text,)

    def __repr__(self) -> str:
        return json.dumps(self.text, ensure_ascii=False)

    def matches(self, token: SubjectToken) -> bool:
        return getattr(token, "lexeme", None) == self.text


class TypedToken(MatchItem):
    """
    Matches one token by its kind.  Several descriptors compress into a
    single step that accepts any of them, as in #(Ident | Number)."""

    def __init__(self, descriptors: Sequence[str]) -> None:
        assert len(descriptors) > 0
        self.descriptors = tuple(descriptors)

    def _key(self) -> tuple[Any, ...]:
        return self.descriptors

    def __repr__(self) -> str:
        return "#(%s)" % " | ".join(self.descriptors)

    def matches(self, token: SubjectToken) -> bool:
        kind = token_kind(token)
        for descriptor in self.descriptors:
            if kind_matches(kind, descriptor):
                return True
        return False


class NonTerminal(MatchItem):
    def __init__(self, name: str) -> None:
        self.name = name

    def _key(self) -> tuple[Any, ...]:
        return (self.name,)

    def __repr__(self) -> str:
        return self.name


class GroupItem(MatchItem):
    """
    A nested set of alternatives with a repetition modifier.  `delimiter`
    is kept for rendering; the semantics are all in `modifier`."""

    def __init__(
        self,
        delimiter: str,
        modifier: str,
        alternatives: Iterable[Alternative],
    ) -> None:
        assert delimiter in OPENERS
        assert modifier in [NONE, OPTIONAL, ZERO_OR_MORE, ONE_OR_MORE]
        self.delimiter = delimiter
        self.modifier = modifier
        self.alternatives = tuple(alternatives)

    def _key(self) -> tuple[Any, ...]:
        return (self.delimiter, self.modifier, self.alternatives)

    def __repr__(self) -> str:
        inner = " | ".join(repr(alt) for alt in self.alternatives)
        suffix = _modifier_suffix[self.modifier]
        if self.delimiter != "(":
            # Optionality is implied by the delimiter.
            suffix = "*" if self.modifier == ZERO_OR_MORE else ""
        return "%s%s%s%s" % (
            self.delimiter,
            inner,
            OPENERS[self.delimiter],
            suffix,
        )


class Alternative:
    """One ordered sequence of match items."""

    def __init__(self, items: Iterable[MatchItem] = ()) -> None:
        self.items = tuple(items)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Alternative):
            return NotImplemented
        return self.items == other.items

    def __hash__(self) -> int:
        return hash(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[MatchItem]:
        return iter(self.items)

    def __repr__(self) -> str:
        return " ".join(repr(item) for item in self.items)


class Rule:
    def __init__(
        self,
        name: str,
        alternatives: Iterable[Alternative],
        line: Optional[int] = None,
    ) -> None:
        self.name = name
        self.alternatives = tuple(alternatives)
        self.line = line

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return (
            self.name == other.name
            and self.alternatives == other.alternatives
        )

    def __hash__(self) -> int:
        return hash((self.name, self.alternatives))

    def __repr__(self) -> str:
        return "%s := %s ;" % (
            self.name,
            " | ".join(repr(alt) for alt in self.alternatives),
        )

    def references(self) -> Iterator[str]:
        """Names of the rules this rule refers to, in order of appearance."""
        for alternative in self.alternatives:
            for name in _references(alternative):
                yield name


def _references(alternative: Alternative) -> Iterator[str]:
    for item in alternative.items:
        if type(item) is NonTerminal:
            yield item.name
        elif type(item) is GroupItem:
            for inner in item.alternatives:
                for name in _references(inner):
                    yield name


class Grammar:
    """
    A collected grammar: an ordered rule table whose first rule is the
    start rule.  Build one with Grammar.from_source() or
    Grammar.from_tokens(); the collector guarantees that every NonTerminal
    names a declared rule.
    """

    def __init__(
        self, rules: Iterable[Rule], filepath: Optional[str] = None
    ) -> None:
        self.rules: dict[str, Rule] = {}
        for rule in rules:
            if rule.name in self.rules:
                raise SpecError("Duplicate rule name: %s" % rule.name)
            self.rules[rule.name] = rule
        if not self.rules:
            raise SpecError("Grammar declares no rules")
        self.filepath = filepath
        for rule in self.rules.values():
            for name in rule.references():
                if name not in self.rules:
                    raise SpecError(
                        "Rule %s refers to undeclared rule %s"
                        % (rule.name, name)
                    )

    @classmethod
    def from_source(
        cls,
        source: str,
        verbose: bool = False,
        logFile: Optional[str] = None,
    ) -> Grammar:
        """
        source : Grammar text, a sequence of `name := alternatives ;`
                 rules.

        verbose : If true, print progress information while collecting
                  the rules.

        logFile : The path of a file to store a human-readable copy of the
                  rule table in."""
        from pegish.scanner import tokenize

        return cls.from_tokens(tokenize(source), verbose, logFile)

    @classmethod
    def from_tokens(
        cls,
        trees: Iterable[Any],
        verbose: bool = False,
        logFile: Optional[str] = None,
    ) -> Grammar:
        """Collect a grammar from already tokenized, tree-shaped input."""
        from pegish.collector import Collector
        from pegish.flatstream import FlatStream

        grammar = Collector(FlatStream.from_tree(trees), verbose).collect()
        if logFile is not None:
            with open(logFile, "w") as f:
                grammar.write_table(f)
        return grammar

    @property
    def start(self) -> str:
        return next(iter(self.rules))

    @property
    def names(self) -> list[str]:
        return list(self.rules)

    def __contains__(self, name: str) -> bool:
        return name in self.rules

    def __len__(self) -> int:
        return len(self.rules)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Grammar):
            return NotImplemented
        return list(self.rules.values()) == list(other.rules.values())

    def rule(self, name: str) -> Rule:
        try:
            return self.rules[name]
        except KeyError:
            raise SpecError("Undeclared rule: %s" % name) from None

    def __repr__(self) -> str:
        return "\n".join(repr(rule) for rule in self.rules.values())

    def write_table(self, f: Optional[IO[str]] = None) -> None:
        """Write a human-readable rule table (to stdout by default)."""
        if f is None:
            f = sys.stdout
        if self.filepath is not None:
            print("# FILEPATH %s" % json.dumps(self.filepath), file=f)
        for index, rule in enumerate(self.rules.values()):
            marker = "%start" if index == 0 else "%rule"
            print("%s %s" % (marker, rule.name), file=f)
            for number, alternative in enumerate(rule.alternatives):
                print("  [%d] %r" % (number, alternative), file=f)
