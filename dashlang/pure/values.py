"""Runtime values of Dash: Number, String, Bool, Unit and Function. Values are tagged: every value knows its kind, and
operators check kinds explicitly rather than relying on Python's implicit conversions (in Python, True == 1).
"""

from dataclasses import dataclass, field
from typing import Tuple, Union

from dashlang.lang.numerical import numberify


class Value:
    """Superclass for all runtime values."""
    kind = "Value"

    def render(self):
        """Text written by a print statement."""
        raise NotImplementedError()


@dataclass(frozen=True)
class Number(Value):
    value: Union[int, float]
    kind = "Number"

    def render(self):
        return numberify(self.value)


@dataclass(frozen=True)
class String(Value):
    value: str
    kind = "String"

    def render(self):
        return self.value


@dataclass(frozen=True)
class Bool(Value):
    value: bool
    kind = "Bool"

    def render(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class UnitType(Value):
    kind = "Unit"

    def render(self):
        return "nil"


Unit = UnitType()
TRUE = Bool(True)
FALSE = Bool(False)


@dataclass(frozen=True, eq=False)
class Function(Value):
    """Closure: parameter names and body, plus the environment the function was defined in. Functions compare by
    identity.
    """
    name: str
    params: Tuple[str, ...]
    body: tuple
    env: object = field(repr=False)
    kind = "Function"

    @property
    def arity(self):
        return len(self.params)

    def render(self):
        return f"<fn {self.name}>"


def values_equal(left, right):
    """Equality is defined across all kinds. Values of different kinds are never equal."""
    if left.kind != right.kind:
        return False
    if isinstance(left, Function):
        return left is right
    if isinstance(left, UnitType):
        return True
    return left.value == right.value
