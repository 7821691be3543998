from math import isqrt as _isqrt


Q112 = 2 ** 112
UINT112_MAX = 2 ** 112 - 1
BPS = 10_000
MBPS = 10_000_000


def isqrt(value: int) -> int:
    """Floor integer square root."""
    if value < 0:
        raise ValueError("Square root of a negative value.")
    return _isqrt(value)


def min_int(a: int, b: int) -> int:
    return a if a < b else b


def max_int(a: int, b: int) -> int:
    return a if a > b else b


def abs_diff(a: int, b: int) -> int:
    return a - b if a >= b else b - a


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Computes floor(a * b / denominator) on the full-width product.

    :raises ZeroDivisionError: if denominator is zero
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero.")
    return (a * b) // denominator


def mul_div_up(a: int, b: int, denominator: int) -> int:
    """Computes ceil(a * b / denominator)."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div_up denominator is zero.")
    return -((-(a * b)) // denominator)


def div_round_half_up(numerator: int, denominator: int) -> int:
    """Division rounded to the nearest integer, ties rounded up."""
    quotient, remainder = divmod(numerator, denominator)
    if remainder * 2 >= denominator:
        quotient += 1
    return quotient


def fits_uint112(value: int) -> bool:
    return 0 <= value <= UINT112_MAX
