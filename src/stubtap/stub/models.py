"""
StubTap Data Model

Stubs, their input expectations, lookup queries and the transient
close-match candidates used for not-found diagnostics.
"""

from typing import Dict, Any, List, Optional, Tuple
from dataclasses import dataclass, field


# Rule names, in the order they are checked for a single stub
RULE_EQUALS = 'equals'
RULE_CONTAINS = 'contains'
RULE_MATCHES = 'matches'
RULES = (RULE_EQUALS, RULE_CONTAINS, RULE_MATCHES)


@dataclass(frozen=True)
class Expectation:
    """
    Expected input of a stub.

    Normally exactly one of the three modes is populated. A mode is absent
    when its mapping is None or empty.
    """

    equals: Optional[Dict[str, Any]] = None
    contains: Optional[Dict[str, Any]] = None
    matches: Optional[Dict[str, Any]] = None

    def populated_rules(self) -> List[Tuple[str, Dict[str, Any]]]:
        """Return (rule, mapping) pairs for every populated mode, in check order."""
        rules = []
        for rule in RULES:
            expect = getattr(self, rule)
            if expect:
                rules.append((rule, expect))
        return rules

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Expectation':
        """Create Expectation from dictionary."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Stub input must be an object, got {type(data).__name__}")

        kwargs = {}
        for rule in RULES:
            expect = data.get(rule)
            if expect is not None and not isinstance(expect, dict):
                raise ValueError(f"Stub input '{rule}' must be an object, got {type(expect).__name__}")
            kwargs[rule] = expect
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting absent modes."""
        return {rule: expect for rule, expect in self.populated_rules()}


@dataclass(frozen=True)
class Stub:
    """A registered expectation paired with its canned output."""

    service: str
    method: str
    input: Expectation = field(default_factory=Expectation)
    output: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Stub':
        """
        Create Stub from a stub definition dictionary.

        Args:
            data: Definition with service, method, input and output fields

        Returns:
            Stub instance

        Raises:
            ValueError: If service or method is missing or empty
        """
        if not isinstance(data, dict):
            raise ValueError(f"Stub definition must be an object, got {type(data).__name__}")

        service = data.get('service')
        method = data.get('method')
        if not service or not isinstance(service, str):
            raise ValueError("Stub definition requires a non-empty 'service'")
        if not method or not isinstance(method, str):
            raise ValueError("Stub definition requires a non-empty 'method'")

        return cls(
            service=service,
            method=method,
            input=Expectation.from_dict(data.get('input')),
            output=data.get('output')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in stub definition format."""
        return {
            'service': self.service,
            'method': self.method,
            'input': self.input.to_dict(),
            'output': self.output
        }


@dataclass
class LookupQuery:
    """Incoming request payload to find a stub for."""

    service: str
    method: str
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LookupQuery':
        """Create LookupQuery from a find request body."""
        if not isinstance(data, dict):
            raise ValueError(f"Lookup request must be an object, got {type(data).__name__}")

        payload = data.get('data') or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Lookup 'data' must be an object, got {type(payload).__name__}")

        service = data.get('service')
        method = data.get('method')
        if not service or not isinstance(service, str):
            raise ValueError("Lookup request requires a non-empty 'service'")
        if not method or not isinstance(method, str):
            raise ValueError("Lookup request requires a non-empty 'method'")

        return cls(service=service, method=method, data=payload)


@dataclass
class CloseMatch:
    """Candidate collected during a failed scan (diagnostics only)."""

    rule: str
    expect: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {'rule': self.rule, 'expect': self.expect}
