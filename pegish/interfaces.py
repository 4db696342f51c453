"""
This module declares several structural ("duck typing") interfaces
that objects or classes can implement to be used in the library
"""

from __future__ import annotations

import abc
from typing import (
    TYPE_CHECKING,
    Any,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

if TYPE_CHECKING:
    from pegish.ast import AstNode
    from pegish.cursor import Cursor
    from pegish.report import ParserError


@runtime_checkable
class SubjectToken(Protocol):
    """
    Anything with a `lexeme` (compared against terminals) and a `kind`
    (compared against typed-token matches) is a subject token; it need not
    inherit from this class.  An optional `line` attribute is used for
    diagnostics.
    """

    lexeme: str
    kind: Any


class Parser(abc.ABC):
    @abc.abstractmethod
    def parse(
        self, tokens: Any, start: Optional[str] = None, complete: bool = False
    ) -> Union[AstNode, ParserError]:
        raise NotImplementedError

    @abc.abstractmethod
    def match_rule(
        self, name: str, cursor: Cursor
    ) -> Union[AstNode, ParserError]:
        raise NotImplementedError
