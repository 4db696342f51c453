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
The pegish module compiles a compact, EBNF-like grammar into a PEG-style
recursive-descent matcher.  Rules are written as

    language := (stmt)* #(EOF) ;
    stmt     := "let" #(Ident) '=' (#(Ident) | numeric)* ';' ;
    numeric  := #(Number) ;

and may use the following items:

       "text" 'c' word : Terminal; matches a token whose lexeme is the text.
                         A bare word is a terminal unless it names a rule.
              rulename : Non-terminal; matches the named rule.
              #(Ident) : Typed token; matches a token by its kind.
                         #(A | B) accepts either kind.
                  (..) : Group, matched exactly once.
            [..]  {..} : Optional group.
     (..)* (..)+ (..)? : Zero or more, one or more, optional.
                     | : Separates alternatives, tried in order.

The first rule is the start rule.  A grammar is collected into a Grammar
object, which the Peg runtime matches against subject tokens:

    grammar = pegish.Grammar.from_source(text)
    parser = pegish.Peg(grammar)
    result = parser.parse(tokens)

Subject tokens are any objects with `lexeme` and `kind` attributes, such
as pegish.Lexeme; pegish.tokenize() scans text into such tokens.  Input may
be nested with pegish.Group, which is flattened into matched begin/end
marker tokens before matching.

parse() returns an AstNode, whose children are sub-rule AstNodes and
matched tokens, or a ParserError describing the furthest failure together
with the failures of the sub-rules that were tried.

Parsing is ordered choice with backtracking and no memoization.  Left
recursive grammars are not supported: they run into the recursion limit,
which parse() reports as a ParsingError.
"""

from __future__ import annotations


__all__ = (
    "AnyException",
    "AstNode",
    "Cursor",
    "EndOfInput",
    "FlatStream",
    "Grammar",
    "Group",
    "Lexeme",
    "Parser",
    "ParserError",
    "ParsingError",
    "Peg",
    "PrintTracer",
    "RecordingTracer",
    "ScannerError",
    "SpecError",
    "SubjectToken",
    "Tracer",
    "tokenize",
    "__version__",
)

from pegish._version import __version__
from pegish.ast import AstNode
from pegish.cursor import Cursor
from pegish.errors import AnyException, EndOfInput, ParsingError, SpecError
from pegish.flatstream import FlatStream
from pegish.grammar import Grammar
from pegish.interfaces import Parser, SubjectToken
from pegish.pegparser import Peg
from pegish.report import ParserError
from pegish.scanner import ScannerError, tokenize
from pegish.tokens import Group, Lexeme
from pegish.trace import PrintTracer, RecordingTracer, Tracer
