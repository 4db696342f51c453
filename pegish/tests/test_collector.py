import contextlib
import io
import os
import tempfile
import unittest

from pegish import Grammar, SpecError
from pegish.grammar import (
    NONE,
    ONE_OR_MORE,
    OPTIONAL,
    ZERO_OR_MORE,
    Alternative,
    GroupItem,
    NonTerminal,
    Rule,
    Terminal,
    TypedToken,
)


class TestCollector(unittest.TestCase):
    def test_rule_table(self):
        grammar = Grammar.from_source(
            """
            expr := term (("+" | "-") term)* ;
            term := #(Number) | "(" expr ")" ;
            """
        )
        self.assertEqual(grammar.start, "expr")
        self.assertEqual(grammar.names, ["expr", "term"])
        self.assertEqual(len(grammar), 2)
        self.assertIn("term", grammar)
        self.assertNotIn("factor", grammar)

        sign = GroupItem(
            "(",
            NONE,
            [Alternative([Terminal("+")]), Alternative([Terminal("-")])],
        )
        self.assertEqual(
            grammar.rule("expr").alternatives,
            (
                Alternative(
                    [
                        NonTerminal("term"),
                        GroupItem(
                            "(",
                            ZERO_OR_MORE,
                            [Alternative([sign, NonTerminal("term")])],
                        ),
                    ]
                ),
            ),
        )
        self.assertEqual(
            grammar.rule("term").alternatives,
            (
                Alternative([TypedToken(["Number"])]),
                Alternative(
                    [Terminal("("), NonTerminal("expr"), Terminal(")")]
                ),
            ),
        )
        self.assertEqual(grammar.rule("term").line, 3)
        self.assertEqual(
            list(grammar.rule("expr").references()), ["term", "term"]
        )
        with self.assertRaises(SpecError):
            grammar.rule("factor")

    def test_bare_words(self):
        grammar = Grammar.from_source("stmt := let value ; value := x ;")
        self.assertEqual(
            grammar.rule("stmt").alternatives[0].items,
            (Terminal("let"), NonTerminal("value")),
        )
        self.assertEqual(
            grammar.rule("value").alternatives[0].items, (Terminal("x"),)
        )

    def test_punctuation_terminals(self):
        grammar = Grammar.from_source("r := ',' . ;")
        self.assertEqual(
            grammar.rule("r").alternatives[0].items,
            (Terminal(","), Terminal(".")),
        )

    def test_typed_tokens(self):
        grammar = Grammar.from_source(
            "t := #(TokenType::Identifier) #(A | B::C) #( x . y ) ;"
        )
        self.assertEqual(
            grammar.rule("t").alternatives[0].items,
            (
                TypedToken(["TokenType.Identifier"]),
                TypedToken(["A", "B.C"]),
                TypedToken(["x.y"]),
            ),
        )

    def test_spaced_typed_tokens(self):
        grammar = Grammar.from_source(
            "t := #( TokenType :: Identifier ) #(a . b::c | D) ;"
        )
        self.assertEqual(
            grammar.rule("t").alternatives[0].items,
            (
                TypedToken(["TokenType.Identifier"]),
                TypedToken(["a.b.c", "D"]),
            ),
        )

    def test_modifiers(self):
        grammar = Grammar.from_source(
            "m := ('a') ('a')* ('a')+ ('a')? ['a'] ['a']* ['a']+ {'a'}"
            " {'a'}? ;"
        )
        self.assertEqual(
            [item.modifier for item in grammar.rule("m").alternatives[0]],
            [
                NONE,
                ZERO_OR_MORE,
                ONE_OR_MORE,
                OPTIONAL,
                OPTIONAL,
                ZERO_OR_MORE,
                ZERO_OR_MORE,
                OPTIONAL,
                OPTIONAL,
            ],
        )

    def test_alternatives(self):
        grammar = Grammar.from_source("r := ('a' | 'b') 'c' | 'd' | ;")
        alternatives = grammar.rule("r").alternatives
        self.assertEqual(len(alternatives), 3)
        self.assertEqual(len(alternatives[0]), 2)
        self.assertEqual(alternatives[1], Alternative([Terminal("d")]))
        self.assertEqual(alternatives[2], Alternative())

    def test_filepath(self):
        for source in [
            '# FILEPATH "x.peg"\nr := a ;',
            '# FILEPATH "x.peg";\nr := a ;',
        ]:
            grammar = Grammar.from_source(source)
            self.assertEqual(grammar.filepath, "x.peg")
            self.assertEqual(grammar.names, ["r"])
        self.assertIsNone(Grammar.from_source("r := a ;").filepath)

    def test_repr_round_trip(self):
        source = """
            expr := term (("+" | "-") term)* | [sign] #(A | B.C) ;
            term := {"x"}? | ("y")+ ("z")? | ;
            sign := '-' ;
        """
        grammar = Grammar.from_source(source)
        self.assertEqual(Grammar.from_source(repr(grammar)), grammar)
        self.assertEqual(repr(grammar.rule("sign")), 'sign := "-" ;')

    def test_escaped_terminals(self):
        grammar = Grammar.from_source(
            'r := "\\b" "\\f" "\\u0001" "a\\tb" "\\"" ;'
        )
        terminals = [item.text for item in grammar.rule("r").alternatives[0]]
        self.assertEqual(terminals, ["\b", "\f", "\x01", "a\tb", '"'])
        self.assertEqual(Grammar.from_source(repr(grammar)), grammar)

    def test_construct(self):
        rule = Rule("r", [Alternative([Terminal("a")])])
        grammar = Grammar([rule])
        self.assertEqual(grammar, Grammar.from_source("r := 'a' ;"))
        with self.assertRaises(SpecError):
            Grammar([rule, rule])
        with self.assertRaises(SpecError):
            Grammar([Rule("r", [Alternative([NonTerminal("missing")])])])

    def test_errors(self):
        for source in [
            "",
            "// nothing but a comment",
            "r = 'a' ;",
            "r : 'a' ;",
            "r",
            "r :",
            "r := 'a'",
            "r := 'a' ;;",
            "'r' := 'a' ;",
            "r := 'a' ; r := 'b' ;",
            "r := 'a' * ;",
            "r := ? 'a' ;",
            "r := # 'a' ;",
            "r := #[x] ;",
            "r := #() ;",
            "r := #(A | ) ;",
            "r := #((A)) ;",
            "r := #(A B) ;",
            "r := #(A.) ;",
            "r := #(. A) ;",
            "r := #(A : B) ;",
            "r := #(A ::: B) ;",
            "r := #(A | B C) ;",
            "r := #('A') ;",
            'r := "" ;',
            "r := (('a') ;",
            "r := 'a' ] ;",
            "#",
            "# INCLUDE \"x\"",
            "# FILEPATH x",
        ]:
            with self.assertRaises(SpecError, msg=source):
                Grammar.from_source(source)

    def test_error_messages(self):
        with self.assertRaises(SpecError) as cm:
            Grammar.from_source("a := 'x' ;\nr := 'a' * ;")
        self.assertIn("Dangling modifier '*'", str(cm.exception))
        self.assertIn("line 2", str(cm.exception))

        with self.assertRaises(SpecError) as cm:
            Grammar.from_source("r := 'a'")
        self.assertIn("missing its terminating ';'", str(cm.exception))

        with self.assertRaises(SpecError) as cm:
            Grammar.from_source("r := #(A B) ;")
        self.assertIn(
            "Malformed token type descriptor 'A B'", str(cm.exception)
        )

    def test_verbose(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            Grammar.from_source("r := a | b ; s := r ;", verbose=True)
        self.assertIn(
            "pegish.Collector: Rule r: 2 alternative(s)", out.getvalue()
        )
        self.assertIn("start rule r", out.getvalue())

    def test_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "table.txt")
            Grammar.from_source(
                '# FILEPATH "g.peg"\nr := a | s ; s := "b" ;', logFile=path
            )
            with open(path) as f:
                table = f.read()
        self.assertEqual(
            table,
            '# FILEPATH "g.peg"\n'
            "%start r\n"
            '  [0] "a"\n'
            "  [1] s\n"
            "%rule s\n"
            '  [0] "b"\n',
        )


if __name__ == "__main__":
    unittest.main()
