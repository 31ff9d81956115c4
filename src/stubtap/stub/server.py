"""
StubTap Stub Server

FastAPI-based HTTP interface to a StubRepository.

Features:
- Stub registration, lookup, listing and clearing over HTTP
- Human-readable not-found diagnostics in lookup errors
- Admin API for metrics and configuration
"""

from __future__ import annotations  # Enable forward references for type hints

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..common import get_env_setting, safe_json_parse
from .errors import StubLookupError
from .loader import StubLoader
from .models import Stub, LookupQuery
from .repository import StubRepository


@dataclass
class StubServerConfig:
    """Configuration for stub server behavior."""

    # Server options
    host: str = "127.0.0.1"
    port: int = 4771
    log_level: str = "info"

    # Lookup failures
    not_found_status: int = 404

    # Admin API
    admin_enabled: bool = True
    admin_prefix: str = "/__admin__"

    @classmethod
    def from_env(cls) -> 'StubServerConfig':
        """Build config from STUBTAP_* environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            host=get_env_setting('host', defaults.host),
            port=int(get_env_setting('port', str(defaults.port))),
            log_level=get_env_setting('log_level', defaults.log_level).lower(),
            admin_enabled=get_env_setting('admin_enabled', 'true').lower() not in ('0', 'false', 'no')
        )


@dataclass
class StubMetrics:
    """Track stub server metrics."""

    total_lookups: int = 0
    matched_lookups: int = 0
    unmatched_lookups: int = 0
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self, registered_stubs: int = 0) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Args:
            registered_stubs: Current repository size, reported alongside the counters
        """
        uptime_seconds = (datetime.now() - datetime.fromisoformat(self.start_time)).total_seconds()
        return {
            'total_lookups': self.total_lookups,
            'matched_lookups': self.matched_lookups,
            'unmatched_lookups': self.unmatched_lookups,
            'registered_stubs': registered_stubs,
            'match_rate': round((self.matched_lookups / self.total_lookups * 100) if self.total_lookups > 0 else 0, 2),
            'uptime_seconds': round(uptime_seconds, 2),
            'start_time': self.start_time
        }


class StubServer:
    """
    FastAPI-based stub server.

    Serves stub outputs for lookup requests and lets clients register
    and clear stubs at runtime.

    Example:
        # Load a stub directory and start server
        server = StubServer(stub_dir='stubs/')
        server.start(host='0.0.0.0', port=4771)

        # Share a repository with other callers
        repo = StubRepository()
        server = StubServer(repository=repo, config=StubServerConfig(port=9000))
    """

    def __init__(
        self,
        repository: Optional[StubRepository] = None,
        config: Optional[StubServerConfig] = None,
        stub_dir: Optional[str] = None
    ):
        """
        Initialize stub server.

        Args:
            repository: Repository to serve (a new empty one if None)
            config: Optional StubServerConfig for server behavior
            stub_dir: Optional directory of stub definitions to load first
        """
        self.repository = repository if repository is not None else StubRepository()
        self.config = config or StubServerConfig()
        self.metrics = StubMetrics()

        self.logger = logging.getLogger("stubtap.stub.server")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        if stub_dir:
            StubLoader(self.repository).load_directory(stub_dir)

        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="StubTap Stub Server",
            description="Stub registration and lookup for request/response mocking",
            version="1.0.0"
        )

        @app.get("/")
        async def list_stubs():
            """List all registered stubs grouped by service and method."""
            return JSONResponse(content=self._snapshot_to_dict())

        @app.post("/add")
        async def add_stub(request: Request):
            """Register one stub definition."""
            body = safe_json_parse(await request.body())
            if body is None:
                return JSONResponse(content={'error': 'Request body must be a JSON stub definition'}, status_code=400)

            try:
                stub = Stub.from_dict(body)
            except ValueError as e:
                return JSONResponse(content={'error': str(e)}, status_code=400)

            self.repository.register(stub)
            return JSONResponse(content={'status': 'added', 'service': stub.service, 'method': stub.method})

        @app.post("/find")
        async def find_stub(request: Request):
            """Find the output of the first stub matching the request payload."""
            body = safe_json_parse(await request.body())
            if body is None:
                return JSONResponse(content={'error': 'Request body must be a JSON lookup query'}, status_code=400)

            try:
                query = LookupQuery.from_dict(body)
            except ValueError as e:
                return JSONResponse(content={'error': str(e)}, status_code=400)

            return await self._handle_lookup(query)

        @app.api_route("/clear", methods=["GET", "POST"])
        async def clear_stubs():
            """Remove every registered stub."""
            count = self.repository.clear()
            return JSONResponse(content={'status': 'cleared', 'cleared_count': count})

        # Admin API routes
        if self.config.admin_enabled:
            @app.get(f"{self.config.admin_prefix}/metrics")
            async def get_metrics():
                """Get server metrics."""
                return JSONResponse(content=self.metrics.to_dict(registered_stubs=self.repository.count()))

            @app.post(f"{self.config.admin_prefix}/reset")
            async def reset_metrics():
                """Reset metrics."""
                self.metrics = StubMetrics()
                return JSONResponse(content={'status': 'reset'})

            @app.get(f"{self.config.admin_prefix}/config")
            async def get_config():
                """Get current configuration."""
                return JSONResponse(content={
                    'host': self.config.host,
                    'port': self.config.port,
                    'log_level': self.config.log_level,
                    'not_found_status': self.config.not_found_status,
                    'total_stubs': self.repository.count()
                })

        return app

    async def _handle_lookup(self, query: LookupQuery) -> JSONResponse:
        """
        Run a lookup and turn the outcome into a response.

        The lookup runs in the threadpool since caller-supplied patterns go
        through the backtracking re engine and must not stall the event loop.

        Args:
            query: Parsed lookup query

        Returns:
            200 with the stub output, or the configured not-found status
            with the error message
        """
        self.metrics.total_lookups += 1

        try:
            output = await run_in_threadpool(self.repository.find_stub, query)
        except StubLookupError as e:
            self.metrics.unmatched_lookups += 1
            self.logger.warning(f"No match found for {query.service}/{query.method} ({e.kind})")
            self.logger.debug(e.message)
            return JSONResponse(content=e.to_dict(), status_code=self.config.not_found_status)

        self.metrics.matched_lookups += 1
        self.logger.debug(f"Matched {query.service}/{query.method}")
        return JSONResponse(content=output)

    def _snapshot_to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            service: {
                method: [stub.to_dict() for stub in stubs]
                for method, stubs in methods.items()
            }
            for service, methods in self.repository.snapshot().items()
        }

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: bool = True
    ):
        """
        Start the stub server.

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        self.logger.info(
            f"StubTap server starting on {actual_host}:{actual_port} "
            f"with {self.repository.count()} stubs"
        )

        if self.config.admin_enabled:
            self.logger.info(f"Admin API: http://{actual_host}:{actual_port}{self.config.admin_prefix}/metrics")

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_stub_server(
    stub_dir: Optional[str] = None,
    host: str = "127.0.0.1",
    port: int = 4771,
    log_level: str = "info",
    admin_enabled: bool = True,
    repository: Optional[StubRepository] = None
) -> StubServer:
    """
    Convenience function to create and configure a stub server.

    Args:
        stub_dir: Directory of stub definitions to load
        host: Host to bind to
        port: Port to bind to
        log_level: Server log level
        admin_enabled: Expose the admin API
        repository: Existing repository to serve

    Returns:
        Configured StubServer instance
    """
    config = StubServerConfig(
        host=host,
        port=port,
        log_level=log_level,
        admin_enabled=admin_enabled
    )

    return StubServer(repository=repository, config=config, stub_dir=stub_dir)
