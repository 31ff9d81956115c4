"""
StubTap Match Strategies

The three predicates applied between a stored expectation and an
incoming request payload:
- equals: whole-payload deep equality
- contains: expected fields are a subset of the payload
- matches: each expected field is a regex searched in the payload value
"""

import logging
import re
from typing import Any, Callable, Dict

from .errors import ConversionError
from .models import RULE_EQUALS, RULE_CONTAINS, RULE_MATCHES
from .values import to_comparable_string, values_equal


logger = logging.getLogger("stubtap.stub")


def equals(expect: Dict[str, Any], data: Dict[str, Any]) -> bool:
    """Payload must be deeply equal to the expectation (same key set)."""
    return values_equal(expect, data)


def contains(expect: Dict[str, Any], data: Dict[str, Any]) -> bool:
    """
    Every expected field must be present in the payload with an equal value.

    Extra payload fields are ignored.
    """
    for key, value in expect.items():
        if key not in data:
            return False

        if not values_equal(value, data[key]):
            return False

    return True


def matches(expect: Dict[str, Any], data: Dict[str, Any]) -> bool:
    """
    Every expected field is a regex that must be found in the payload value.

    Values that cannot be rendered as text (missing fields, nested
    structures) and invalid patterns fail the predicate rather than the
    lookup.

    Args:
        expect: Mapping of field name to regex pattern
        data: Lookup payload

    Returns:
        True if every pattern is found in its field
    """
    for key, pattern_value in expect.items():
        try:
            pattern = to_comparable_string(pattern_value)
            actual = to_comparable_string(data.get(key))
        except ConversionError as e:
            logger.warning(f"Can't match field '{key}': {e}")
            return False

        try:
            found = re.search(pattern, actual)
        except re.error as e:
            logger.warning(f"Error on matching regex {pattern} with {actual} error: {e}")
            return False

        if not found:
            return False

    return True


STRATEGIES: Dict[str, Callable[[Dict[str, Any], Dict[str, Any]], bool]] = {
    RULE_EQUALS: equals,
    RULE_CONTAINS: contains,
    RULE_MATCHES: matches,
}
