"""Runtime values produced by evaluation: integers and the unit value."""

from dataclasses import dataclass

from blocklang.lang.error import IntegerOverflow


INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


class Value:
    """Superclass of everything an expression or statement can evaluate to."""


@dataclass(frozen=True)
class Number(Value):
    """Signed 32-bit integer. Constructing one outside that range raises IntegerOverflow."""
    number: int

    def __post_init__(self):
        if not INT_MIN <= self.number <= INT_MAX:
            raise IntegerOverflow(self.number)

    def __str__(self):
        return str(self.number)


@dataclass(frozen=True)
class Unit(Value):
    """Value of definitions and of empty blocks."""

    def __str__(self):
        return "()"


UNIT = Unit()
