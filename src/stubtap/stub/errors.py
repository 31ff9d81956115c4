"""
StubTap Lookup Errors

Typed failures raised by the stub repository and the value comparator.
"""

from typing import Any, Dict, Optional


class ConversionError(ValueError):
    """Raised when a value has no comparable string form."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"was not possible to infer a string representation for the value "
            f"{value!r} ({type(value).__name__})"
        )


class StubLookupError(Exception):
    """Base class for every lookup failure surfaced to callers."""

    kind = 'lookup_error'

    def __init__(self, message: str, service: str = '', method: str = ''):
        super().__init__(message)
        self.message = message
        self.service = service
        self.method = method

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            'error': self.message,
            'kind': self.kind,
            'service': self.service,
            'method': self.method
        }


class ServiceNotFoundError(StubLookupError):
    kind = 'service_not_found'

    def __init__(self, service: str):
        super().__init__(f"Can't find stub for Service: {service}", service=service)


class MethodNotFoundError(StubLookupError):
    kind = 'method_not_found'

    def __init__(self, service: str, method: str):
        super().__init__(
            f"Can't find stub for Service:{service} and Method:{method}",
            service=service,
            method=method
        )


class EmptyStubSetError(StubLookupError):
    kind = 'empty_stub_set'

    def __init__(self, service: str, method: str):
        super().__init__(
            f"Stub for Service:{service} and Method:{method} is empty",
            service=service,
            method=method
        )


class StubNotFoundError(StubLookupError):
    """
    No registered stub matched the query.

    Carries the rendered diagnostic message and the closest candidate
    (if any) so callers can inspect it programmatically.
    """

    kind = 'stub_not_found'

    def __init__(self, message: str, query: Any, closest: Optional[Any] = None):
        super().__init__(message, service=query.service, method=query.method)
        self.query = query
        self.closest = closest

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.closest is not None:
            data['closest_match'] = self.closest.to_dict()
        return data
