"""
The pegish module implements the following exception classes:

  * AnyException
  * SpecError
  * ParsingError
  * EndOfInput

ParserError, the diagnostic tree returned for failed matches, lives in
pegish.report and derives from ParsingError.
"""

from typing import Any


# ============================================================================
# Begin exceptions.
#
class AnyException(Exception):
    """
    Top-level class for all exceptions thrown within the pegish module.
    """


class SpecError(AnyException):
    """
    Specification error exception.  SpecError arises when the grammar
    collector detects a structural error in the grammar source, such as a
    missing ':=', an unterminated group or a dangling modifier.  These are
    never recovered by backtracking.
    """


class ParsingError(AnyException):
    """
    Top level parsing exception class, from which we derive all exceptions
    that occur during the matching of subject input.
    """


class EndOfInput(ParsingError):
    """
    Cursor exhaustion.  EndOfInput arises when a Cursor is asked to peek at
    or advance past its bound.
    """

    def __init__(self, position: int, bound: int) -> None:
        super().__init__(
            "cursor ran off the end of the token list (given %d, max of %d)"
            % (position, bound)
        )
        self.position = position
        self.bound = bound

    def __reduce__(self) -> Any:
        return (type(self), (self.position, self.bound))


#
# End exceptions.
# ============================================================================
