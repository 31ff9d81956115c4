"""
StubTap Value Comparator

Type-aware comparison primitives for the untyped field/value maps carried
by stub expectations and lookup payloads.
"""

from typing import Any

from .errors import ConversionError


def to_comparable_string(value: Any) -> str:
    """
    Render a scalar value as text for regex matching.

    Args:
        value: str, int, float or bool

    Returns:
        String form (floats use fixed 5-decimal precision)

    Raises:
        ConversionError: If value is not a supported scalar (dict, list, None, ...)
    """
    if isinstance(value, str):
        return value

    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return 'true' if value else 'false'

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        return f"{value:.5f}"

    raise ConversionError(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(expected: Any, actual: Any) -> bool:
    """
    Deep equality that does not let Python's numeric tower blur kinds.

    Booleans never equal numbers and strings never equal numbers. Integers
    and floats compare numerically since JSON does not tell them apart.

    Args:
        expected: Value from the stub expectation
        actual: Value from the lookup payload

    Returns:
        True if both values are deeply equal
    """
    if _is_number(expected) and _is_number(actual):
        return expected == actual

    if type(expected) is not type(actual):
        return False

    if isinstance(expected, dict):
        if expected.keys() != actual.keys():
            return False
        return all(values_equal(expected[key], actual[key]) for key in expected)

    if isinstance(expected, (list, tuple)):
        if len(expected) != len(actual):
            return False
        return all(values_equal(e, a) for e, a in zip(expected, actual))

    return expected == actual
