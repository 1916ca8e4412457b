"""Primitive parser combinators that the blocklang grammar is composed from.

Every parser takes the remaining input and returns a tuple of (remaining input, parsed value), or raises a ParseError
describing what was expected. Input is only ever sliced. Whitespace is never skipped implicitly: every gap between two
grammar elements has to be consumed by one of the extract_whitespace/extract_spaces parsers.
"""

from blocklang.lang.error import ParseError


WHITESPACE = (" ", "\n")


def take_while(accept, s):
    """Consumes the longest prefix of s whose characters all satisfy accept. Never fails."""
    end = len(s)
    for idx, char in enumerate(s):
        if not accept(char):
            end = idx
            break
    return s[end:], s[:end]


def take_while_required(accept, s, message):
    """Like take_while, but an empty match raises a ParseError with message."""
    rest, extracted = take_while(accept, s)
    if not extracted:
        raise ParseError(message, rest=s)
    return rest, extracted


def tag(literal, s):
    """Matches literal at the start of s and returns the remaining input."""
    if not s.startswith(literal):
        raise ParseError("expected {}", literal, rest=s)
    return s[len(literal):]


def extract_digits(s):
    return take_while_required(lambda char: "0" <= char <= "9", s, "expected digits")


def extract_whitespace(s):
    return take_while(lambda char: char in WHITESPACE, s)


def extract_whitespace_required(s):
    return take_while_required(lambda char: char in WHITESPACE, s, "expected whitespace")


def extract_spaces(s):
    """Spaces only: a newline is never consumed."""
    return take_while(lambda char: char == " ", s)


def extract_spaces_required(s):
    return take_while_required(lambda char: char == " ", s, "expected space")


def extract_identifier(s):
    """Identifiers start with an ASCII letter and continue with ASCII letters/digits."""
    if not s or not (s[0].isascii() and s[0].isalpha()):
        raise ParseError("expected identifier", rest=s)
    return take_while(lambda char: char.isascii() and char.isalnum(), s)


def sequence(parser, separator, s):
    """Zero or more items parsed by parser, each followed by whatever separator consumes. Stops at the first item that
    fails to parse; that failure is discarded.
    """
    items = []
    while True:
        try:
            s, item = parser(s)
        except ParseError:
            return s, items

        items.append(item)
        s, __ = separator(s)


def sequence_required(parser, separator, s):
    """Like sequence, but at least one item has to be parsed."""
    rest, items = sequence(parser, separator, s)
    if not items:
        raise ParseError("expected a sequence with at least one item", rest=s)
    return rest, items


def first_success(parsers, s):
    """Tries each parser in order and returns the result of the first one that succeeds. If every parser fails, the
    failure of the last one is raised: failures of alternatives are never merged.
    """
    error = ParseError("no alternatives to parse", rest=s)
    for parser in parsers:
        try:
            return parser(s)
        except ParseError as exc:
            error = exc
    raise error
