"""Precedence-climbing parser that builds a lossless concrete syntax tree. Unlike blocklang.lang.lexical, it handles
operator precedence, prefix negation and parentheses, but it only covers expressions and is not used for evaluation.

Binding powers (left, right):

```
"+" "-"      (1, 2)
"*" "/"      (3, 4)
prefix "-"   5
```

Every token, whitespace included, ends up in the tree, so the text of the root is always the parsed input.
"""

from blocklang.lang.error import GenericException
from blocklang.syntax.lexer import Lexer, SyntaxKind


BINARY_OPS = {
    SyntaxKind.PLUS: (1, 2),
    SyntaxKind.MINUS: (1, 2),
    SyntaxKind.STAR: (3, 4),
    SyntaxKind.SLASH: (3, 4),
}
PREFIX_BINDING_POWER = 5


def quote(text):
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


class SyntaxToken:

    def __init__(self, kind, text):
        self.kind = kind
        self.text = text

    def debug(self, offset, indents):
        end = offset + len(self.text)
        return [f"{'  ' * indents}{self.kind}@{offset}..{end} {quote(self.text)}"], end

    def __repr__(self):
        return f"SyntaxToken({self.kind}, {self.text!r})"


class SyntaxNode:

    def __init__(self, kind, children):
        self.kind = kind
        self.children = children

    @property
    def text(self):
        return "".join(child.text for child in self.children)

    def debug(self, offset, indents):
        """Returns the lines describing self and its children, plus the offset right after self."""
        lines = []
        end = offset
        for child in self.children:
            child_lines, end = child.debug(end, indents + 1)
            lines += child_lines
        return [f"{'  ' * indents}{self.kind}@{offset}..{end}"] + lines, end

    def __repr__(self):
        return f"SyntaxNode({self.kind}, {self.children!r})"


class TreeBuilder:
    """Builds a SyntaxNode tree bottom-up. Checkpoints allow a node to be started retroactively, wrapping children that
    were already added (needed for binary expressions, whose kind is only known once the operator is seen).
    """

    def __init__(self):
        self._stack = []  # list of (kind, children) of unfinished nodes
        self._root = None

    def start_node(self, kind):
        self._stack.append((kind, []))

    def start_node_at(self, checkpoint, kind):
        __, children = self._stack[-1]
        wrapped = children[checkpoint:]
        del children[checkpoint:]
        self._stack.append((kind, wrapped))

    def checkpoint(self):
        return len(self._stack[-1][1])

    def token(self, kind, text):
        self._stack[-1][1].append(SyntaxToken(kind, text))

    def finish_node(self):
        kind, children = self._stack.pop()
        node = SyntaxNode(kind, children)
        if self._stack:
            self._stack[-1][1].append(node)
        else:
            self._root = node

    def finish(self):
        if self._stack:
            raise GenericException("unfinished nodes left in syntax tree builder", internal=True)
        return self._root


class SyntaxParse:
    """Result of Parser.parse: the root node and any errors found on the way."""

    def __init__(self, root, errors):
        self.root = root
        self.errors = errors

    def debug_tree(self):
        lines, __ = self.root.debug(0, 0)
        return "\n".join(lines)


class Parser:

    def __init__(self, text):
        self.tokens = list(Lexer(text))
        self.pos = 0
        self.builder = TreeBuilder()
        self.errors = []

    def parse(self):
        self.builder.start_node(SyntaxKind.ROOT)

        if self.peek() is not None:
            self.expr_binding_power(0)

        if self.peek() is not None:
            self.errors.append(f"unexpected {self.tokens[self.pos][0]}")
        while self.pos < len(self.tokens):
            self.bump()

        self.builder.finish_node()
        return SyntaxParse(self.builder.finish(), self.errors)

    def expr_binding_power(self, min_binding_power):
        self.eat_trivia()
        checkpoint = self.builder.checkpoint()

        kind = self.peek()
        if kind in (SyntaxKind.NUMBER, SyntaxKind.IDENT):
            self.bump()

        elif kind is SyntaxKind.MINUS:
            self.bump()
            self.builder.start_node_at(checkpoint, SyntaxKind.PREFIX_EXPR)
            self.expr_binding_power(PREFIX_BINDING_POWER)
            self.builder.finish_node()

        elif kind is SyntaxKind.L_PAREN:
            self.bump()
            self.expr_binding_power(0)
            if self.peek() is SyntaxKind.R_PAREN:
                self.bump()
            else:
                self.errors.append("expected ')'")

        else:
            self.errors.append(f"expected number, identifier, '-' or '(', got {kind or 'end of input'}")
            return

        while True:
            binding_power = BINARY_OPS.get(self.peek())
            if binding_power is None:
                return

            left_binding_power, right_binding_power = binding_power
            if left_binding_power < min_binding_power:
                return

            self.bump()

            self.builder.start_node_at(checkpoint, SyntaxKind.BINARY_EXPR)
            self.expr_binding_power(right_binding_power)
            self.builder.finish_node()

    def peek(self):
        """Kind of the next non-whitespace token, or None at the end of input. Skipped whitespace is kept as trivia."""
        self.eat_trivia()
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][0]
        return None

    def eat_trivia(self):
        while self.pos < len(self.tokens) and self.tokens[self.pos][0] is SyntaxKind.WHITESPACE:
            self.bump()

    def bump(self):
        kind, text = self.tokens[self.pos]
        self.pos += 1
        self.builder.token(kind, text)
