"""
This module contains the grammar collector, which reads a flattened
grammar source and builds the rule table.

The grammar language is

    grammar      := (rule)+
    rule         := name ':=' alternatives ';'
    alternatives := alternative ('|' alternative)*
    alternative  := item*
    item         := terminal | typed_token | name | group
    typed_token  := '#' '(' descriptor ('|' descriptor)* ')'
    group        := ( '(' alternatives ')' | '[' ... ']' | '{' ... '}' )
                    ('*' | '+' | '?')?

plus the top-level directive `# FILEPATH "name"`.  Structural errors in
the grammar raise SpecError; nothing is recovered.
"""

from __future__ import annotations

from typing import Any, Optional

from pegish.cursor import Cursor
from pegish.errors import EndOfInput, SpecError
from pegish.flatstream import FlatStream
from pegish.grammar import (
    MODIFIER_SYMBOLS,
    Alternative,
    Grammar,
    GroupItem,
    MatchItem,
    NonTerminal,
    Rule,
    Terminal,
    TypedToken,
    group_modifier,
)
from pegish.tokens import (
    GroupBegin,
    Identifier,
    Literal,
    Punctuation,
    is_punct,
    normalize_descriptor,
    token_text,
)


def _where(token: Any) -> str:
    line = getattr(token, "line", None)
    if line is None:
        return ""
    return " (line %d)" % line


class Collector:
    """
    Collects rules in two passes.  The first splits the source into
    `name := body ;` statements, skipping nested groups through their
    end-index, and records every rule name.  The second extracts the
    alternatives of each body, so that a bare identifier is resolved once
    into a NonTerminal (a declared rule) or a Terminal.
    """

    def __init__(self, stream: FlatStream, verbose: bool = False) -> None:
        self.stream = stream
        self.verbose = verbose
        self.filepath: Optional[str] = None

    def collect(self) -> Grammar:
        if self.verbose:
            print("pegish.Collector: Splitting grammar into rules...")
        statements = self._statements()
        names = set(name for name, _, _ in statements)

        rules = []
        for name, line, body in statements:
            alternatives = self._alternatives(body, names)
            if self.verbose:
                print(
                    "pegish.Collector: Rule %s: %d alternative(s)"
                    % (name, len(alternatives))
                )
            rules.append(Rule(name, alternatives, line))
        if self.verbose and rules:
            print(
                "pegish.Collector: Collected %d rules, start rule %s"
                % (len(rules), rules[0].name)
            )
        return Grammar(rules, self.filepath)

    # ===========================================================
    # Pass one: statements.
    #
    def _statements(self) -> list[tuple[str, Optional[int], Cursor]]:
        cursor = Cursor(self.stream.tokens)
        statements: list[tuple[str, Optional[int], Cursor]] = []
        seen: set[str] = set()
        while not cursor.at_end():
            head = cursor.advance()
            if is_punct(head, "#"):
                self._directive(cursor, head)
                continue
            if type(head) is not Identifier:
                raise SpecError(
                    "Expected a rule name, got %r%s"
                    % (token_text(head), _where(head))
                )
            name = head.lexeme
            if name in seen:
                raise SpecError(
                    "Duplicate rule name: %s%s" % (name, _where(head))
                )
            seen.add(name)
            self._expect_punct(cursor, ":", head)
            self._expect_punct(cursor, "=", head)

            start = cursor.mark()
            while True:
                if cursor.at_end():
                    raise SpecError(
                        "Rule %s is missing its terminating ';'%s"
                        % (name, _where(head))
                    )
                token = cursor.peek()
                if isinstance(token, GroupBegin):
                    cursor.reset(token.end)
                    continue
                if is_punct(token, ";"):
                    break
                cursor.advance()
            body = cursor.sub(start, cursor.mark())
            statements.append((name, head.line, body))
            # Eat the trailing semicolon.
            cursor.advance()
        return statements

    def _expect_punct(self, cursor: Cursor, symbol: str, head: Any) -> None:
        try:
            token = cursor.advance()
        except EndOfInput:
            raise SpecError(
                "Assignment statement was malformed: rule %s ends after "
                "its name%s" % (head.lexeme, _where(head))
            ) from None
        if not is_punct(token, symbol):
            raise SpecError(
                "Assignment statement was malformed: expected %r after %s, "
                "got %r%s"
                % (symbol, head.lexeme, token_text(token), _where(token))
            )

    def _directive(self, cursor: Cursor, hash_token: Any) -> None:
        try:
            command = cursor.advance()
        except EndOfInput:
            raise SpecError(
                "Dangling '#' at end of grammar%s" % _where(hash_token)
            ) from None
        if type(command) is not Identifier or command.lexeme != "FILEPATH":
            raise SpecError(
                "Unexpected preprocessing option: %s%s"
                % (token_text(command), _where(command))
            )
        if cursor.at_end() or type(cursor.peek()) is not Literal:
            raise SpecError(
                "FILEPATH expects a quoted file name%s" % _where(command)
            )
        self.filepath = cursor.advance().value
        if self.verbose:
            print("pegish.Collector: FILEPATH %s" % self.filepath)
        if not cursor.at_end() and is_punct(cursor.peek(), ";"):
            cursor.advance()

    # ===========================================================
    # Pass two: alternatives.
    #
    def _alternatives(
        self, cursor: Cursor, names: set[str]
    ) -> list[Alternative]:
        """
        Split the tokens under `cursor` on top-level '|'.  Bars inside
        nested groups never split, because groups are consumed whole."""
        alternatives: list[Alternative] = []
        items: list[MatchItem] = []
        while not cursor.at_end():
            token = cursor.peek()
            if is_punct(token, "|"):
                cursor.advance()
                alternatives.append(Alternative(items))
                items = []
            elif is_punct(token, "#"):
                items.append(self._typed_token(cursor))
            elif isinstance(token, GroupBegin):
                items.append(self._group(cursor, names))
            else:
                cursor.advance()
                items.append(self._single(token, names))
        alternatives.append(Alternative(items))
        return alternatives

    def _single(self, token: Any, names: set[str]) -> MatchItem:
        if type(token) is Identifier:
            if token.lexeme in names:
                return NonTerminal(token.lexeme)
            return Terminal(token.lexeme)
        if type(token) is Literal:
            if token.value == "":
                raise SpecError("Empty terminal%s" % _where(token))
            return Terminal(token.value)
        if type(token) is Punctuation and token.lexeme in MODIFIER_SYMBOLS:
            raise SpecError(
                "Dangling modifier %r%s: modifiers must follow a group"
                % (token.lexeme, _where(token))
            )
        return Terminal(token_text(token))

    def _group(self, cursor: Cursor, names: set[str]) -> GroupItem:
        begin = cursor.peek()
        interior = cursor.group()
        alternatives = self._alternatives(interior, names)

        symbol = None
        if not cursor.at_end():
            following = cursor.peek()
            if (
                type(following) is Punctuation
                and following.lexeme in MODIFIER_SYMBOLS
            ):
                cursor.advance()
                symbol = following.lexeme
        return GroupItem(
            begin.delimiter,
            group_modifier(begin.delimiter, symbol),
            alternatives,
        )

    def _typed_token(self, cursor: Cursor) -> TypedToken:
        hash_token = cursor.advance()
        following: Any = None if cursor.at_end() else cursor.peek()
        if (
            not isinstance(following, GroupBegin)
            or following.delimiter != "("
        ):
            raise SpecError(
                "'#' must be followed by a parenthesised token type%s"
                % _where(hash_token)
            )
        interior = cursor.group()

        descriptors: list[str] = []
        parts: list[Any] = []
        while True:
            token = None if interior.at_end() else interior.advance()
            if token is None or is_punct(token, "|"):
                descriptors.append(self._descriptor(parts, hash_token))
                parts = []
                if token is None:
                    break
                continue
            if isinstance(token, GroupBegin):
                raise SpecError(
                    "Token type descriptors cannot contain groups%s"
                    % _where(token)
                )
            parts.append(token)
        return TypedToken(descriptors)

    def _descriptor(self, parts: list[Any], hash_token: Any) -> str:
        """
        Check that `parts` spell a dotted name, with each pair of names
        joined by '.' or '::', and return it in canonical form."""
        if not parts:
            raise SpecError(
                "Empty token type descriptor%s" % _where(hash_token)
            )
        index = 0
        while index < len(parts) and type(parts[index]) is Identifier:
            index += 1
            if index == len(parts):
                return normalize_descriptor(
                    "".join(token_text(part) for part in parts)
                )
            if is_punct(parts[index], "."):
                index += 1
            elif index + 1 < len(parts) and all(
                is_punct(part, ":") for part in parts[index:index + 2]
            ):
                index += 2
            else:
                break
        text = " ".join(token_text(part) for part in parts)
        raise SpecError(
            "Malformed token type descriptor %r%s" % (text, _where(hash_token))
        )
