"""
StubTap Stub Repository

Thread-safe in-memory registry of stubs keyed by service and method.

Stubs for one (service, method) pair are kept in registration order and
the first stub whose expectation matches a lookup wins. A single lock
serializes every operation.
"""

import copy
import logging
import threading
from typing import Any, Dict, List, Optional

from .errors import (
    ServiceNotFoundError,
    MethodNotFoundError,
    EmptyStubSetError,
    StubNotFoundError,
)
from .models import Stub, Expectation, LookupQuery, CloseMatch
from .ranking import render_fields, closest_match, stub_not_found_message
from .strategies import STRATEGIES


# service name -> method name -> stubs in registration order
StubMapping = Dict[str, Dict[str, List[Stub]]]


class StubRepository:
    """
    In-memory stub registry.

    Construct one per process and pass it to the loader and the server.

    Example:
        repo = StubRepository()
        repo.register(Stub('Greeter', 'SayHello',
                           Expectation(equals={'name': 'John'}),
                           {'message': 'Hello John'}))

        output = repo.lookup('Greeter', 'SayHello', {'name': 'John'})
    """

    def __init__(self):
        """Initialize an empty repository."""
        self._stubs: StubMapping = {}
        self._lock = threading.Lock()
        self.logger = logging.getLogger("stubtap.stub")

    def register(self, stub: Stub) -> None:
        """
        Append a stub to its (service, method) list.

        Duplicates are allowed and kept in order. The stub is deep-copied so
        later changes to the caller's mappings or output do not reach it.

        Args:
            stub: Stub to store
        """
        stored = copy.deepcopy(stub)
        with self._lock:
            methods = self._stubs.setdefault(stored.service, {})
            methods.setdefault(stored.method, []).append(stored)

        self.logger.debug(f"Registered stub for {stub.service}/{stub.method}")

    def add(self, service: str, method: str, input: Expectation, output: Any) -> Stub:
        """Build a Stub from its parts, register it and return it."""
        stub = Stub(service=service, method=method, input=input, output=output)
        self.register(stub)
        return stub

    def find_stub(self, query: LookupQuery) -> Any:
        """
        Find the output of the first stub matching the query.

        Each stub's populated modes are tried in order (equals, contains,
        matches) and any one succeeding is a match.

        Args:
            query: Service, method and request payload

        Returns:
            Output of the matching stub

        Raises:
            ServiceNotFoundError: No stubs for the service
            MethodNotFoundError: No stubs for the method
            EmptyStubSetError: Method registered with no stubs
            StubNotFoundError: No stub matched; message explains the closest one
        """
        with self._lock:
            methods = self._stubs.get(query.service)
            if methods is None:
                raise ServiceNotFoundError(query.service)

            stubs = methods.get(query.method)
            if stubs is None:
                raise MethodNotFoundError(query.service, query.method)

            if not stubs:
                raise EmptyStubSetError(query.service, query.method)

            candidates: List[CloseMatch] = []
            for stub in stubs:
                for rule, expect in stub.input.populated_rules():
                    candidates.append(CloseMatch(rule=rule, expect=expect))
                    if STRATEGIES[rule](expect, query.data):
                        return copy.deepcopy(stub.output)

            closest = copy.deepcopy(closest_match(render_fields(query.data), candidates))
            raise StubNotFoundError(
                stub_not_found_message(query, candidates, closest),
                query=query,
                closest=closest
            )

    def lookup(self, service: str, method: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """Convenience wrapper around find_stub()."""
        return self.find_stub(LookupQuery(service=service, method=method, data=data or {}))

    def snapshot(self) -> StubMapping:
        """
        Copy the current repository state.

        Nothing in the copy is shared with stored state.

        Returns:
            Mapping of service -> method -> list of stubs
        """
        with self._lock:
            return {
                service: {method: copy.deepcopy(stubs) for method, stubs in methods.items()}
                for service, methods in self._stubs.items()
            }

    def clear(self) -> int:
        """
        Remove every stub.

        Returns:
            Number of stubs removed
        """
        with self._lock:
            removed = self._count_locked()
            self._stubs = {}

        self.logger.info(f"Cleared {removed} stubs")
        return removed

    def count(self) -> int:
        """Total number of stored stubs."""
        with self._lock:
            return self._count_locked()

    def _count_locked(self) -> int:
        return sum(len(stubs) for methods in self._stubs.values() for stubs in methods.values())
