"""Numbers in Dash. A Number is either integral (Python int) or fractional (Python float); arithmetic on two integral
Numbers stays integral, anything involving a fractional Number is fractional.
"""

from decimal import Decimal

from dashlang.lang.error import DashException, DivideByZero, NumericOverflow


def number(literal):
    """Returns int or float given the text of a numeric literal ('12', '0.5')."""
    try:
        if "." in literal:
            return float(literal)
        return int(literal)
    except ValueError:
        raise DashException("expected numeric literal, got {}", literal, internal=True)


def numberify(num):
    """Returns str(num) as printed by Dash, always in positional notation: integers as digits, fractions using the
    shortest digits that round-trip ('0.1', '3.0', '10000000000000000.0' rather than '1e+16').
    """
    if isinstance(num, bool) or not isinstance(num, (int, float)):
        raise DashException("expected number, got {}", repr(num), internal=True)

    try:
        text = repr(num)
    except ValueError:  # int past the host's digit limit
        raise NumericOverflow("print")

    if isinstance(num, float) and "e" in text:
        text = format(Decimal(text), "f")
        if "." not in text:
            text += ".0"
    return text


def divide(left, right):
    """Integral division truncates toward zero; anything else is true division."""
    if right == 0:
        raise DivideByZero()

    if isinstance(left, int) and isinstance(right, int):
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient
    return left / right
