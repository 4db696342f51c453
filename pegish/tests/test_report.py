import unittest

from pegish import Grammar, Lexeme, ParserError, Peg
from pegish.report import context_window, line_at


def numbered(count):
    return [Lexeme("Word", "w%d" % i, line=i // 2 + 1) for i in range(count)]


class TestReport(unittest.TestCase):
    def test_context_window(self):
        tokens = numbered(10)
        self.assertEqual(context_window(tokens, 5, 2), tuple(tokens[3:8]))
        self.assertEqual(context_window(tokens, 0, 2), tuple(tokens[0:3]))
        self.assertEqual(context_window(tokens, 10, 2), tuple(tokens[8:]))
        self.assertEqual(context_window(tokens, 5, 0), (tokens[5],))
        self.assertEqual(
            context_window(tokens, 3, 2, bound=4), tuple(tokens[1:4])
        )
        self.assertEqual(context_window([], 0, 3), ())

    def test_line_at(self):
        tokens = numbered(5)
        self.assertEqual(line_at(tokens, 0), 1)
        self.assertEqual(line_at(tokens, 3), 2)
        self.assertEqual(line_at(tokens, 5), 3)
        self.assertIsNone(line_at([], 0))
        self.assertIsNone(line_at([Lexeme("Word", "x")], 0))

    def test_error_fields(self):
        tokens = numbered(6)
        error = ParserError(
            "r", 4, tokens, expected='"x"', alternative=1, radius=1
        )
        self.assertEqual(error.context, tuple(tokens[3:6]))
        self.assertEqual(error.line, 3)
        self.assertIs(error.token, tokens[4])
        self.assertEqual(
            error.summary(), "line 3: rule r failed at 'w4' (expected \"x\")"
        )
        self.assertEqual(str(error), error.summary())
        self.assertEqual(
            repr(error), "ParserError(rule='r', position=4, children=0)"
        )

        error = ParserError("r", 6, tokens, filepath="g.peg")
        self.assertIsNone(error.token)
        self.assertEqual(
            error.summary(), "g.peg:3: rule r failed at end of input"
        )

        error = ParserError("r", 0, [Lexeme("Word", "x")], filepath="g.peg")
        self.assertEqual(error.summary(), "g.peg: rule r failed at 'x'")

    def test_raisable(self):
        error = ParserError("r", 0, [])
        with self.assertRaises(ParserError) as cm:
            raise error
        self.assertIs(cm.exception, error)

    def test_tree(self):
        tokens = numbered(4)
        leaf = ParserError("leaf", 3, tokens)
        shallow = ParserError("shallow", 1, tokens)
        middle = ParserError("middle", 3, tokens, children=[leaf])
        root = ParserError("root", 2, tokens, children=[shallow, middle])
        self.assertEqual(
            [error.rule for error in root.walk()],
            ["root", "shallow", "middle", "leaf"],
        )
        self.assertIs(root.deepest(), leaf)
        self.assertIs(leaf.deepest(), leaf)

        lines = root.format_tree().splitlines()
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[0].startswith("line 2: rule root failed"))
        self.assertTrue(lines[3].startswith("    line 2: rule leaf failed"))
        self.assertIn("[alternative 0] near: w0 w1 w2 w3", lines[3])

    def test_furthest_alternative(self):
        peg = Peg(
            Grammar.from_source("r := 'a' 'b' 'c' | 'a' 'b' 'd' 'e' | 'x' ;")
        )
        tokens = [Lexeme("Word", w) for w in ("a", "b", "d", "f")]
        result = peg.parse(tokens)
        self.assertIsInstance(result, ParserError)
        self.assertEqual(result.position, 3)
        self.assertEqual(result.alternative, 1)
        self.assertEqual(result.expected, '"e"')

    def test_context_radius(self):
        peg = Peg(Grammar.from_source("r := 'a' 'b' ;"), context_radius=1)
        tokens = [Lexeme("Word", w) for w in ("a", "x", "y", "z")]
        result = peg.parse(tokens)
        self.assertEqual(result.context, tuple(tokens[0:3]))


if __name__ == "__main__":
    unittest.main()
