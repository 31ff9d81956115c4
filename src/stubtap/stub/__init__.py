"""
StubTap Stub Module

Stub registration and matching for request/response mocking.

This module provides:
- Thread-safe stub repository keyed by service and method
- Matching strategies (equals, contains, matches)
- Closest-match diagnostics for failed lookups
- Directory loader for stub definition files
- FastAPI-based stub server
"""

from .errors import (
    ConversionError,
    StubLookupError,
    ServiceNotFoundError,
    MethodNotFoundError,
    EmptyStubSetError,
    StubNotFoundError,
)
from .models import Stub, Expectation, LookupQuery, CloseMatch
from .repository import StubRepository
from .loader import StubLoader
from .server import StubServer, StubServerConfig, StubMetrics, create_stub_server

__all__ = [
    # Model
    'Stub',
    'Expectation',
    'LookupQuery',
    'CloseMatch',

    # Repository
    'StubRepository',
    'StubLoader',

    # Errors
    'ConversionError',
    'StubLookupError',
    'ServiceNotFoundError',
    'MethodNotFoundError',
    'EmptyStubSetError',
    'StubNotFoundError',

    # Server
    'StubServer',
    'StubServerConfig',
    'StubMetrics',
    'create_stub_server',
]
