"""
Token model.  Grammar sources and subject input are both sequences of
tokens; tree-shaped input nests tokens inside Group objects, which the
flattener turns into matched GroupBegin/GroupEnd markers.

Any object with `lexeme` and `kind` attributes can be used as a subject
token.  The classes here are what the grammar scanner produces, plus
Lexeme, a plain token for hand-built subject input.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Optional

from mypy_extensions import mypyc_attr


OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")": "(", "]": "[", "}": "{"}


@mypyc_attr(serializable=True, allow_interpreted_subclasses=True)
class Token:
    """
    Base class of all tokens.  `lexeme` is the text compared against
    terminals, `kind` is the type descriptor compared against typed-token
    matches.
    """

    kind = "Token"

    def __init__(self, lexeme: str, line: Optional[int] = None) -> None:
        self.lexeme = lexeme
        self.line = line

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._key())

    def _key(self) -> tuple[Any, ...]:
        return (self.kind, self.lexeme)

    def __repr__(self) -> str:
        return "%s(%r)" % (self.kind, self.lexeme)


class Identifier(Token):
    kind = "Ident"


class Literal(Token):
    """
    A quoted string, quoted character or number.  `lexeme` keeps the
    source spelling (quotes included), `value` holds the unescaped text.
    """

    kind = "Literal"

    def __init__(
        self, lexeme: str, value: str, line: Optional[int] = None
    ) -> None:
        super().__init__(lexeme, line)
        self.value = value


class Punctuation(Token):
    kind = "Punct"


class GroupBegin(Token):
    """
    Opening marker of a flattened group.  `end` is the index immediately
    after the matching GroupEnd, so the group spans tokens[i:end].
    """

    kind = "Begin"

    def __init__(
        self, delimiter: str, end: int, line: Optional[int] = None
    ) -> None:
        assert delimiter in OPENERS
        super().__init__(delimiter, line)
        self.delimiter = delimiter
        self.end = end

    def _key(self) -> tuple[Any, ...]:
        return (self.kind, self.delimiter, self.end)

    def __repr__(self) -> str:
        return "Begin(%r, %d)" % (self.delimiter, self.end)


class GroupEnd(Token):
    kind = "End"

    def __init__(self, delimiter: str, line: Optional[int] = None) -> None:
        assert delimiter in OPENERS
        super().__init__(OPENERS[delimiter], line)
        self.delimiter = delimiter

    def __repr__(self) -> str:
        return "End(%r)" % (self.delimiter,)


class Lexeme(Token):
    """
    General purpose subject token with an arbitrary kind.

        Lexeme("Ident", "world")
        Lexeme(TokenType.Number, "3", line=2)
    """

    def __init__(
        self, kind: Any, lexeme: str, line: Optional[int] = None
    ) -> None:
        super().__init__(lexeme, line)
        self.kind = kind

    def __repr__(self) -> str:
        return "%s(%r)" % (describe_kind(self.kind), self.lexeme)


class Group:
    """
    A delimited group in tree-shaped input.  `children` may contain further
    Groups.
    """

    def __init__(
        self,
        delimiter: str,
        children: Iterable[Any] = (),
        line: Optional[int] = None,
        end_line: Optional[int] = None,
    ) -> None:
        assert delimiter in OPENERS
        self.delimiter = delimiter
        self.children: list[Any] = list(children)
        self.line = line
        self.end_line = line if end_line is None else end_line

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return (
            self.delimiter == other.delimiter
            and self.children == other.children
        )

    def __repr__(self) -> str:
        return "Group(%r, %r)" % (self.delimiter, self.children)


def describe_kind(kind: Any) -> str:
    """Canonical text of a token kind, used for typed-token matching."""
    if isinstance(kind, str):
        return kind
    if isinstance(kind, enum.Enum):
        return "%s.%s" % (type(kind).__name__, kind.name)
    if isinstance(kind, type):
        return kind.__name__
    return str(kind)


def normalize_descriptor(text: str) -> str:
    return "".join(text.split()).replace("::", ".")


def kind_matches(kind: Any, descriptor: str) -> bool:
    described = describe_kind(kind)
    if described == descriptor:
        return True
    if "." in descriptor:
        return False
    return described.rpartition(".")[2] == descriptor


def token_text(token: Any) -> str:
    lexeme = getattr(token, "lexeme", None)
    if lexeme is None:
        return str(token)
    return str(lexeme)


def token_kind(token: Any) -> Any:
    return getattr(token, "kind", type(token))


def is_punct(token: Any, symbol: str) -> bool:
    return type(token) is Punctuation and token.lexeme == symbol
