"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator, Iterator

from memory_cache.cache.manager import CacheManager
from memory_cache.cache.store import EntryStore
from memory_cache.cache.eviction import EvictionPolicy
from memory_cache.protocol.parser import ProtocolParser
from memory_cache.network.tcp_server import CacheServer


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Clock Fixtures
# ============================================================================

class FakeClock:
    """Manually advanced time source for deterministic expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock starting at t=1000."""
    return FakeClock()


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def cache(clock: FakeClock) -> Iterator[CacheManager]:
    """Create a CacheManager (100 entries, 100s TTL) on the fake clock, timers off."""
    mgr = CacheManager(
        {"max_entries": 100, "default_ttl": 100},
        clock=clock,
        start_timers=False,
    )
    yield mgr
    mgr.destroy()


@pytest.fixture
def small_cache(clock: FakeClock) -> Iterator[CacheManager]:
    """Create a CacheManager with capacity for 5 entries for eviction testing."""
    mgr = CacheManager(
        {"max_entries": 5, "default_ttl": 100},
        clock=clock,
        start_timers=False,
    )
    yield mgr
    mgr.destroy()


@pytest.fixture
def store() -> EntryStore:
    """Create an empty EntryStore."""
    return EntryStore()


@pytest.fixture
def policy() -> EvictionPolicy:
    """Create an eviction policy for 5 entries / 1000 bytes."""
    return EvictionPolicy(max_entries=5, max_memory=1000)


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[CacheServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a CacheServer on a random free port with a 100-entry cache
    2. Starts it in a background task
    3. Yields the server for testing
    4. Stops the server and destroys the cache
    """
    srv = CacheServer(
        host='127.0.0.1',
        port=server_port,
        cache=CacheManager({"max_entries": 100}),
    )

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass
    srv.cache.destroy()


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Usage:
        async with AsyncClient('127.0.0.1', 7171) as client:
            response = await client.send_command('SET key "value"')
            assert response == "OK stored"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Args:
            command: Command string (newline will be added if missing)

        Returns:
            Response string (stripped of trailing newline)
        """
        if not command.endswith('\n'):
            command += '\n'

        self.writer.write(command.encode())
        await self.writer.drain()

        response = await self.reader.readline()
        return response.decode().strip()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("GET key")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# MCP Fixtures
# ============================================================================

class DummyMCP:
    """Minimal FastMCP stand-in to capture tool and resource registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.resources = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator

    def resource(self, uri: str, **kwargs):
        def _decorator(fn):
            self.resources[uri] = {"fn": fn, **kwargs}
            return fn
        return _decorator


@pytest.fixture
def dummy_mcp() -> DummyMCP:
    return DummyMCP()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

