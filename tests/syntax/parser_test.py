import unittest

from blocklang.lang.error import GenericException
from blocklang.syntax.lexer import SyntaxKind
from blocklang.syntax.parser import Parser, TreeBuilder


def tree(*lines):
    return "\n".join(lines)


class ParserTestCase(unittest.TestCase):

    def check(self, source, expected):
        self.assertEqual(expected, Parser(source).parse().debug_tree(), source)

    def test_parse_nothing(self):
        self.check("", "Root@0..0")

    def test_parse_number(self):
        self.check("123", tree(
            "Root@0..3",
            '  Number@0..3 "123"',
        ))

    def test_parse_binding_usage(self):
        self.check("abc", tree(
            "Root@0..3",
            '  Ident@0..3 "abc"',
        ))

    def test_parse_simple_binary_expression(self):
        self.check("1+2", tree(
            "Root@0..3",
            "  BinaryExpr@0..3",
            '    Number@0..1 "1"',
            '    Plus@1..2 "+"',
            '    Number@2..3 "2"',
        ))

    def test_parse_expression_with_precedence(self):
        self.check("1+2*3", tree(
            "Root@0..5",
            "  BinaryExpr@0..5",
            '    Number@0..1 "1"',
            '    Plus@1..2 "+"',
            "    BinaryExpr@2..5",
            '      Number@2..3 "2"',
            '      Star@3..4 "*"',
            '      Number@4..5 "3"',
        ))

    def test_parse_binary_expression_with_mixed_binding_power(self):
        self.check("1+2*3-4", tree(
            "Root@0..7",
            "  BinaryExpr@0..7",
            "    BinaryExpr@0..5",
            '      Number@0..1 "1"',
            '      Plus@1..2 "+"',
            "      BinaryExpr@2..5",
            '        Number@2..3 "2"',
            '        Star@3..4 "*"',
            '        Number@4..5 "3"',
            '    Minus@5..6 "-"',
            '    Number@6..7 "4"',
        ))

    def test_negation_has_higher_binding_power_than_infix_operators(self):
        self.check("-20+20", tree(
            "Root@0..6",
            "  BinaryExpr@0..6",
            "    PrefixExpr@0..3",
            '      Minus@0..1 "-"',
            '      Number@1..3 "20"',
            '    Plus@3..4 "+"',
            '    Number@4..6 "20"',
        ))

    def test_parse_nested_parentheses(self):
        self.check("((((((10))))))", tree(
            "Root@0..14",
            '  LParen@0..1 "("',
            '  LParen@1..2 "("',
            '  LParen@2..3 "("',
            '  LParen@3..4 "("',
            '  LParen@4..5 "("',
            '  LParen@5..6 "("',
            '  Number@6..8 "10"',
            '  RParen@8..9 ")"',
            '  RParen@9..10 ")"',
            '  RParen@10..11 ")"',
            '  RParen@11..12 ")"',
            '  RParen@12..13 ")"',
            '  RParen@13..14 ")"',
        ))

    def test_parentheses_affect_precedence(self):
        self.check("5*(2+1)", tree(
            "Root@0..7",
            "  BinaryExpr@0..7",
            '    Number@0..1 "5"',
            '    Star@1..2 "*"',
            '    LParen@2..3 "("',
            "    BinaryExpr@3..6",
            '      Number@3..4 "2"',
            '      Plus@4..5 "+"',
            '      Number@5..6 "1"',
            '    RParen@6..7 ")"',
        ))

    def test_whitespace_is_kept(self):
        self.check("1 + 2", tree(
            "Root@0..5",
            "  BinaryExpr@0..5",
            '    Number@0..1 "1"',
            '    Whitespace@1..2 " "',
            '    Plus@2..3 "+"',
            '    Whitespace@3..4 " "',
            '    Number@4..5 "2"',
        ))
        self.check("\n7", tree(
            "Root@0..2",
            '  Whitespace@0..1 "\\n"',
            '  Number@1..2 "7"',
        ))

    def test_errors(self):
        cases = {
            "(1": ["expected ')'"],
            "1 2": ["unexpected Number"],
            "": [],
            "1 + (2 * 3)": [],
            "-": ["expected number, identifier, '-' or '(', got end of input"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Parser(case).parse().errors, case)

    def test_lossless(self):
        should_pass = ["1 + 2 * 3", " -(4 / 2) ", "let x = 1\n", "a $ b", "(1", "1 2 3"]
        for case in should_pass:
            self.assertEqual(case, Parser(case).parse().root.text, case)


class TreeBuilderTestCase(unittest.TestCase):

    def test_unfinished_node(self):
        builder = TreeBuilder()
        builder.start_node(SyntaxKind.ROOT)
        builder.start_node(SyntaxKind.BINARY_EXPR)
        builder.token(SyntaxKind.NUMBER, "1")
        builder.finish_node()

        with self.assertRaises(GenericException) as context:
            builder.finish()
        self.assertTrue(context.exception.internal)

        builder.finish_node()
        self.assertEqual("1", builder.finish().text)


if __name__ == '__main__':
    unittest.main()
