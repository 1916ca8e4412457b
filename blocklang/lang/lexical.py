"""Lexical analysis and evaluation for blocklang. Every grammar object knows how to parse itself from the front of a
string and how to evaluate itself against an Environment.

All grammar can be loosely defined as follows (WS is a space or a newline):

```
<stmt>          ::= <func_def> | <binding_def> | <expr>        ; alternatives are tried in this order
<func_def>      ::= "fn" WS+ <ident> WS* (<ident> WS*)* "=>" WS* <stmt>
<binding_def>   ::= "let" WS+ <ident> WS* "=" WS* <expr>

<expr>          ::= <operation> | <non_operation>
<operation>     ::= <non_operation> WS* <op> WS* <non_operation>  ; one level only: 1+2*3 leaves "*3" behind
<non_operation> ::= <number> | <func_call> | <binding_usage> | <block>
<func_call>     ::= <ident> " "+ <expr> (" "* <expr>)*          ; at least one argument, spaces only
<binding_usage> ::= <ident>
<block>         ::= "{" WS* (<stmt> WS*)* "}"

<number>        ::= [0-9]+
<op>            ::= "+" | "-" | "*" | "/"
<ident>         ::= [a-zA-Z] [a-zA-Z0-9]*
```

A program is a single <stmt>, usually a block holding many statements.
"""

from abc import abstractmethod, ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from blocklang.lang import value
from blocklang.lang.combinators import (extract_digits, extract_identifier, extract_spaces, extract_spaces_required,
                                        extract_whitespace, extract_whitespace_required, first_success, sequence,
                                        sequence_required, tag)
from blocklang.lang.error import (ArityMismatch, DivisionByZero, LeftoverInput, NonNumericOperand, ParseError,
                                  UndefinedBinding)


class Op(Enum):
    """Binary operators. All of them share a single precedence level."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @classmethod
    def parse(cls, s):
        return first_success([lambda s, op=op: (tag(op.value, s), op) for op in cls], s)

    def apply(self, lhs, rhs):
        """Applies self to two ints. Division truncates toward zero; dividing by zero raises ZeroDivisionError."""
        if self is Op.ADD:
            return lhs + rhs
        elif self is Op.SUB:
            return lhs - rhs
        elif self is Op.MUL:
            return lhs * rhs

        quotient = abs(lhs) // abs(rhs)
        return quotient if (lhs < 0) == (rhs < 0) else -quotient


class Grammar(ABC):
    """Superclass representing any grammar object in blocklang."""

    @staticmethod
    @abstractmethod
    def parse(s):
        """This method should parse one grammar object from the front of s and return (remaining input, object), or
        raise a ParseError if s does not start with valid grammar.
        """

    @abstractmethod
    def eval(self, env):
        """This method should evaluate self against env and return a Value, raising an EvalError on failure."""


class Stmt(Grammar):
    """Superclass for statements. Any Expr is also a statement (a bare expression)."""

    @staticmethod
    def parse(s):
        return first_success((FuncDef.parse, BindingDef.parse, Expr.parse), s)


class Expr(Stmt):
    """Superclass for expressions."""

    @staticmethod
    def parse(s):
        """The left-hand side is parsed once; an operator suffix is optional."""
        s, lhs = Expr.parse_non_operation(s)
        try:
            return Operation.parse_rest(lhs, s)
        except ParseError:
            return s, lhs

    @staticmethod
    def parse_non_operation(s):
        return first_success((Number.parse, FuncCall.parse, BindingUsage.parse, Block.parse), s)


@dataclass
class Number(Expr):
    number: int

    @staticmethod
    def parse(s):
        s, digits = extract_digits(s)
        return s, Number(int(digits))

    def eval(self, env):
        return value.Number(self.number)

    def __str__(self):
        return str(self.number)


@dataclass
class Operation(Expr):
    lhs: Expr
    rhs: Expr
    op: Op

    @staticmethod
    def parse(s):
        s, lhs = Expr.parse_non_operation(s)
        return Operation.parse_rest(lhs, s)

    @staticmethod
    def parse_rest(lhs, s):
        s, __ = extract_whitespace(s)

        s, op = Op.parse(s)
        s, __ = extract_whitespace(s)

        s, rhs = Expr.parse_non_operation(s)
        return s, Operation(lhs, rhs, op)

    def eval(self, env):
        lhs = self.lhs.eval(env)
        rhs = self.rhs.eval(env)

        if not isinstance(lhs, value.Number) or not isinstance(rhs, value.Number):
            raise NonNumericOperand()

        try:
            return value.Number(self.op.apply(lhs.number, rhs.number))
        except ZeroDivisionError:
            raise DivisionByZero(self)

    def __str__(self):
        return f"{self.lhs} {self.op.value} {self.rhs}"


@dataclass
class BindingUsage(Expr):
    name: str

    @staticmethod
    def parse(s):
        s, name = extract_identifier(s)
        return s, BindingUsage(name)

    def eval(self, env):
        """A bound value wins. Failing that, a function taking no parameters is called."""
        if env.has_binding(self.name):
            return env.get_binding(self.name)

        if env.has_func(self.name):
            params, __ = env.get_func(self.name)
            if not params:
                return FuncCall(self.name, []).eval(env)

        raise UndefinedBinding(self.name)

    def __str__(self):
        return self.name


@dataclass
class FuncCall(Expr):
    callee: str
    args: List[Expr]

    @staticmethod
    def parse(s):
        s, callee = extract_identifier(s)
        s, __ = extract_spaces_required(s)

        s, args = sequence_required(Expr.parse, extract_spaces, s)
        return s, FuncCall(callee, args)

    def eval(self, env):
        """Arguments are evaluated in the call's own frame before any parameter is bound there, then the body runs in
        that same frame.
        """
        child_env = env.create_child()
        params, body = env.get_func(self.callee)

        if len(params) != len(self.args):
            raise ArityMismatch(len(params), len(self.args))

        values = [arg.eval(child_env) for arg in self.args]
        for param, val in zip(params, values):
            child_env.store_binding(param, val)

        return body.eval(child_env)

    def __str__(self):
        return " ".join([self.callee] + [str(arg) for arg in self.args])


@dataclass
class Block(Expr):
    stmts: List[Stmt] = field(default_factory=list)

    @staticmethod
    def parse(s):
        s = tag("{", s)
        s, __ = extract_whitespace(s)

        stmts = []
        while True:
            try:
                s, stmt = Stmt.parse(s)
            except ParseError:
                break
            stmts.append(stmt)
            s, __ = extract_whitespace(s)

        s = tag("}", s)
        return s, Block(stmts)

    def eval(self, env):
        if not self.stmts:
            return value.UNIT

        child_env = env.create_child()
        *effects, last = self.stmts
        for stmt in effects:
            stmt.eval(child_env)
        return last.eval(child_env)

    def __str__(self):
        if not self.stmts:
            return "{}"
        return "{ " + " ".join(str(stmt) for stmt in self.stmts) + " }"


@dataclass
class BindingDef(Stmt):
    """let <name> = <expr>: stores the value in the current frame."""
    name: str
    value: Expr

    @staticmethod
    def parse(s):
        s = tag("let", s)
        s, __ = extract_whitespace_required(s)

        s, name = extract_identifier(s)
        s, __ = extract_whitespace(s)

        s = tag("=", s)
        s, __ = extract_whitespace(s)

        s, val = Expr.parse(s)
        return s, BindingDef(name, val)

    def eval(self, env):
        env.store_binding(self.name, self.value.eval(env))
        return value.UNIT

    def __str__(self):
        return f"let {self.name} = {self.value}"


@dataclass
class FuncDef(Stmt):
    """fn <name> <params>* => <stmt>: stores the function in the current frame. The body is only evaluated on call."""
    name: str
    params: List[str]
    body: Stmt

    @staticmethod
    def parse(s):
        s = tag("fn", s)
        s, __ = extract_whitespace_required(s)

        s, name = extract_identifier(s)
        s, __ = extract_whitespace(s)

        s, params = sequence(extract_identifier, extract_whitespace, s)

        s = tag("=>", s)
        s, __ = extract_whitespace(s)

        s, body = Stmt.parse(s)
        return s, FuncDef(name, params, body)

    def eval(self, env):
        env.store_func(self.name, self.params, self.body)
        return value.UNIT

    def __str__(self):
        return " ".join(["fn", self.name] + self.params + ["=>", str(self.body)])


class Parse:
    """A fully parsed program: exactly one statement."""

    def __init__(self, stmt):
        self.stmt = stmt

    def eval(self, env):
        return self.stmt.eval(env)

    def __repr__(self):
        return f"Parse({self.stmt!r})"

    def __eq__(self, other):
        return isinstance(other, Parse) and other.stmt == self.stmt


def parse(source):
    """Parses source as a single statement. Raises LeftoverInput if anything, trailing whitespace included, is left."""
    try:
        rest, stmt = Stmt.parse(source)
    except ParseError as exc:
        raise exc.locate(source)

    if rest:
        raise LeftoverInput(rest).locate(source)
    return Parse(stmt)
