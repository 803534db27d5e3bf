"""
Async TCP Server Module

This module implements the asynchronous TCP server exposing a
CacheManager over the line-oriented text protocol.
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..cache.manager import CacheManager
from ..config.settings import settings
from ..protocol.commands import Command, CommandType, Response
from ..protocol.parser import ProtocolParser

logger = logging.getLogger(__name__)


class CacheServer:
    """
    Asynchronous TCP server for the memory cache.

    This server handles multiple concurrent clients using asyncio.
    Each client connection is handled in a separate coroutine; all of
    them share one CacheManager. Cache calls never block on I/O, so they
    run directly on the event loop.

    Features:
    - Non-blocking I/O with asyncio
    - Persistent connections (multiple commands per connection)
    - Graceful error handling and connection cleanup

    Usage:
        server = CacheServer(host='0.0.0.0', port=7171, cache=cache)
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 7171)
        cache: The CacheManager shared by all connections
        parser: The ProtocolParser for parsing commands
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            cache: CacheManager = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            cache: CacheManager instance (creates and owns one with
                default config if not provided)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        # A cache created here is destroyed by stop()
        self._owns_cache = cache is None
        self.cache = cache if cache is not None else CacheManager()
        self.parser = ProtocolParser()

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Reads commands until the client disconnects or sends QUIT,
        answering each one. Errors on one connection are logged and never
        affect other connections.

        Args:
            reader: StreamReader for reading from the client
            writer: StreamWriter for writing to the client
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        logger.debug(f"Client connected: {addr}")

        try:
            while True:
                try:
                    data = await reader.readline()
                except ValueError:
                    # Line exceeded the stream limit; framing is lost
                    await self._send(writer, Response.error("line too long"))
                    logger.debug(f"Oversized request from {addr}, closing")
                    break

                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                try:
                    raw = data.decode().rstrip('\r\n')
                except UnicodeDecodeError:
                    await self._send(writer, Response.error("invalid encoding"))
                    continue

                command = self.parser.parse_request(raw)

                if command.type == CommandType.QUIT:
                    logger.debug(f"Client requested quit: {addr}")
                    break

                if not command.is_valid:
                    response = Response.error("invalid command")
                else:
                    self._total_requests += 1
                    response = self._execute_command(command)

                await self._send(writer, response)

        except ConnectionResetError:
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            try:
                writer.close()
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def _send(self, writer: StreamWriter, response: Response) -> None:
        writer.write(self.parser.format_response(response).encode())
        await writer.drain()

    def _execute_command(self, command: Command) -> Response:
        """
        Execute a parsed command on the cache.

        Args:
            command: The Command object to execute

        Returns:
            Response object with the result
        """
        if command.type == CommandType.SET:
            self.cache.set(command.key, command.value, ttl=command.ttl)
            return Response.stored()

        if command.type == CommandType.GET:
            missing = object()
            value = self.cache.get(command.key, missing)
            if value is missing:
                return Response.key_not_found()
            return Response.value_response(value)

        if command.type == CommandType.DELETE:
            deleted = self.cache.delete(command.key)
            return Response.deleted() if deleted else Response.key_not_found()

        if command.type == CommandType.CLEAR:
            self.cache.clear()
            return Response.cleared()

        if command.type == CommandType.STATS:
            return Response.stats_response(self.cache.get_stats().to_dict())

        return Response.error("invalid command")

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs until cancelled or until stop() is called.

        Example:
            server = CacheServer(port=7171)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=settings.READ_BUFFER_SIZE,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Closes the listening socket and waits for it to fully shut down.
        A cache passed to the constructor is left to its owner; one the
        server created itself is destroyed.
        """
        try:
            if self._server is not None:
                self._server.close()
                try:
                    await self._server.wait_closed()
                finally:
                    self._server = None
                    self._running = False
        finally:
            if self._owns_cache:
                self.cache.destroy()

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with server stats including connection counts,
            request counts, and cache statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "cache_stats": self.cache.get_stats().to_dict(),
        }
