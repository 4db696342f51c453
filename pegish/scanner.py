from __future__ import annotations

import re
from re import compile as re_compile
from typing import Any, Callable, Optional

from pegish.errors import SpecError
from pegish.tokens import (
    CLOSERS,
    OPENERS,
    Group,
    Identifier,
    Literal,
    Punctuation,
    Token,
)


class ScannerError(SpecError):
    def __init__(self, message: str, position: int, line: int) -> None:
        SpecError.__init__(self, "%s (line %d)" % (message, line))
        self.message = message
        self.offset = position
        self.line = line

    def __reduce__(self) -> Any:
        return (type(self), (self.message, self.offset, self.line))


_escapes = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "0": "\0",
}
_escape_re = re_compile(r"\\(u[0-9A-Fa-f]{4}|.)")


def _unescape_one(m: re.Match[str]) -> str:
    escape = m.group(1)
    if len(escape) == 5:
        return chr(int(escape[1:], 16))
    return _escapes.get(escape, escape)


def unescape(body: str) -> str:
    """
    Resolve backslash escapes, including the \\uXXXX form that json.dumps()
    writes.  Any other escaped character stands for itself."""
    return _escape_re.sub(_unescape_one, body)


_Maker = Callable[[str, int], Token]


def _identifier(text: str, line: int) -> Token:
    return Identifier(text, line)


def _quoted(text: str, line: int) -> Token:
    return Literal(text, unescape(text[1:-1]), line)


def _number(text: str, line: int) -> Token:
    return Literal(text, text, line)


def _punctuation(text: str, line: int) -> Token:
    return Punctuation(text, line)


class Scanner:
    """
    Splits grammar (or small subject) text into tree-shaped tokens: a list
    whose elements are tokens or Groups of further tokens.
    """

    whitespace = r"(?:\s+|//[^\n]*|/\*.*?\*/)+"

    def __init__(self) -> None:
        self.regexes: list[tuple[re.Pattern[str], _Maker]] = [
            (re_compile(r"[A-Za-z_]\w*"), _identifier),
            (re_compile(r'"(?:[^"\\\n]|\\.)*"'), _quoted),
            (re_compile(r"'(?:[^'\\\n]|\\.)+'"), _quoted),
            (re_compile(r"\d+(?:\.\d+)?"), _number),
            (re_compile(r"[^\s\w()\[\]{}'\"]"), _punctuation),
        ]
        self.whitespace_re = re_compile(self.whitespace, re.S)
        self.comment_start = re_compile(r"/\*")

    def scan(self, string: str) -> list[Any]:
        regexes = self.regexes
        root: list[Any] = []
        # Open groups, innermost last.
        stack: list[tuple[Group, list[Any], int]] = []
        current = root

        idx = 0
        line = 1
        while idx < len(string):
            m = self.whitespace_re.match(string, idx)
            if m:
                line += string.count("\n", idx, m.end())
                idx = m.end()
                continue
            ch = string[idx]
            if self.comment_start.match(string, idx):
                raise ScannerError("Unterminated block comment", idx, line)
            if ch in OPENERS:
                group = Group(ch, (), line)
                current.append(group)
                stack.append((group, current, idx))
                current = group.children
                idx += 1
                continue
            if ch in CLOSERS:
                if not stack or stack[-1][0].delimiter != CLOSERS[ch]:
                    raise ScannerError(
                        "Unmatched group closer %r" % ch, idx, line
                    )
                group, current, _ = stack.pop()
                group.end_line = line
                idx += 1
                continue
            max_idx = idx
            max_make: Optional[_Maker] = None
            for rgx, make in regexes:
                m = rgx.match(string, idx)
                if m and m.end() > max_idx:
                    max_idx = m.end()
                    max_make = make
            if max_make is None:
                if ch in "'\"":
                    raise ScannerError("Unterminated literal", idx, line)
                raise ScannerError(
                    'Scanning failed at position %s "%s"' % (idx, ch),
                    idx,
                    line,
                )
            current.append(max_make(string[idx:max_idx], line))
            idx = max_idx
        if stack:
            group, _, position = stack[-1]
            raise ScannerError(
                "Unterminated group %r" % group.delimiter,
                position,
                group.line or line,
            )
        return root


_scanner = Scanner()


def tokenize(string: str) -> list[Any]:
    """Scan `string` into tree-shaped tokens."""
    return _scanner.scan(string)
