"""Tokenizer for the precedence-climbing front end. Produces (SyntaxKind, text) pairs that, concatenated, give back the
input exactly: whitespace is a token like any other, and characters that start no token become Error tokens.
"""

from enum import Enum
import re


class SyntaxKind(Enum):
    """Kinds of tokens, followed by the kinds of nodes the parser builds out of them."""
    WHITESPACE = "Whitespace"
    FN_KW = "FnKw"
    LET_KW = "LetKw"
    IDENT = "Ident"
    NUMBER = "Number"
    PLUS = "Plus"
    MINUS = "Minus"
    STAR = "Star"
    SLASH = "Slash"
    EQUALS = "Equals"
    L_BRACE = "LBrace"
    R_BRACE = "RBrace"
    L_PAREN = "LParen"
    R_PAREN = "RParen"
    ERROR = "Error"

    ROOT = "Root"
    BINARY_EXPR = "BinaryExpr"
    PREFIX_EXPR = "PrefixExpr"

    def __str__(self):
        return self.value


KEYWORDS = {"fn": SyntaxKind.FN_KW, "let": SyntaxKind.LET_KW}

PUNCTUATION = {
    "+": SyntaxKind.PLUS,
    "-": SyntaxKind.MINUS,
    "*": SyntaxKind.STAR,
    "/": SyntaxKind.SLASH,
    "=": SyntaxKind.EQUALS,
    "{": SyntaxKind.L_BRACE,
    "}": SyntaxKind.R_BRACE,
    "(": SyntaxKind.L_PAREN,
    ")": SyntaxKind.R_PAREN,
}

TOKEN = re.compile(r"(?P<whitespace>[ \n]+)|(?P<word>[A-Za-z][_A-Za-z0-9]*)|(?P<number>[0-9]+)|(?P<other>.)",
                   re.DOTALL)


class Lexer:
    """Iterates over the tokens of text."""

    def __init__(self, text):
        self.text = text

    def __iter__(self):
        for match in TOKEN.finditer(self.text):
            text = match.group()
            if match.lastgroup == "whitespace":
                yield SyntaxKind.WHITESPACE, text
            elif match.lastgroup == "word":
                yield KEYWORDS.get(text, SyntaxKind.IDENT), text
            elif match.lastgroup == "number":
                yield SyntaxKind.NUMBER, text
            else:
                yield PUNCTUATION.get(text, SyntaxKind.ERROR), text
