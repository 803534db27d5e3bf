#!/usr/bin/env python3
"""
Memory Cache Server Entry Point

This is the main entry point for starting the memory cache server.

Usage:
    python -m memory_cache.server                      # TCP on 0.0.0.0:7171
    python -m memory_cache.server --port 8080          # Custom port
    python -m memory_cache.server --transport stdio    # MCP server on stdio
    python -m memory_cache.server --config cache.json  # Cache options file
    python -m memory_cache.server --max-entries 5000   # Override one option
    python -m memory_cache.server --debug              # Enable debug logging

Environment Variables:
    MEMORY_CACHE_HOST   - Server bind address
    MEMORY_CACHE_PORT   - Server port
    MEMORY_CACHE_DEBUG  - Enable debug mode (true/false)
    CONFIG_PATH         - Cache options file (default ./config.json)
    MAX_ENTRIES, MAX_MEMORY, DEFAULT_TTL, CHECK_INTERVAL, STATS_INTERVAL
                        - Cache option overrides
"""

import argparse
import asyncio
import logging
import signal
import sys

from .cache.manager import CacheManager
from .config.loader import load_cache_config
from .config.settings import CacheConfig, settings
from .network.tcp_server import CacheServer

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Memory Cache: In-Process Key-Value Cache Server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--transport",
        choices=("tcp", "stdio"),
        default="tcp",
        help="Serve the text protocol over TCP or MCP over stdio",
    )
    parser.add_argument("--host", type=str, default=settings.HOST, help="Host address to bind to")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port number to listen on")
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON cache options file")

    defaults = CacheConfig()
    parser.add_argument("--max-entries", type=int, default=None,
                        help=f"Maximum number of entries (default {defaults.max_entries})")
    parser.add_argument("--max-memory", type=int, default=None,
                        help=f"Maximum estimated size in bytes (default {defaults.max_memory})")
    parser.add_argument("--default-ttl", type=float, default=None,
                        help=f"TTL in seconds when none is given (default {defaults.default_ttl})")
    parser.add_argument("--check-interval", type=float, default=None,
                        help=f"Seconds between cleanup passes (default {defaults.check_interval})")
    parser.add_argument("--stats-interval", type=float, default=None,
                        help=f"Seconds between stats updates (default {defaults.stats_interval})")

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False, stream=None) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(stream or sys.stdout),
        ]
    )


def build_cache(args: argparse.Namespace) -> CacheManager:
    """Create the cache from config file, environment and CLI flags."""
    config = load_cache_config(
        path=args.config,
        overrides={
            "max_entries": args.max_entries,
            "max_memory": args.max_memory,
            "default_ttl": args.default_ttl,
            "check_interval": args.check_interval,
            "stats_interval": args.stats_interval,
        },
    )
    return CacheManager(config)


def run_tcp(args: argparse.Namespace, cache: CacheManager) -> None:
    """Serve the text protocol until a signal or keyboard interrupt."""
    server = CacheServer(host=args.host, port=args.port, cache=cache)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        await server.stop()

    # Register signal handlers (Unix only)
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: asyncio.ensure_future(shutdown(s))
            )

    logger.info("Starting Memory Cache server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")

    try:
        loop.run_until_complete(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()


def run_stdio(cache: CacheManager) -> None:
    """Serve the MCP tools on stdin/stdout."""
    from .mcp_app import create_mcp_server

    mcp = create_mcp_server(cache)
    logger.info("Memory Cache MCP server running on stdio")
    try:
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    # stdout carries MCP frames in stdio mode
    setup_logging(debug=args.debug, stream=sys.stderr if args.transport == "stdio" else None)

    cache = build_cache(args)
    logger.info(f"  Cache config: {cache.config.to_dict()}")

    try:
        if args.transport == "stdio":
            run_stdio(cache)
        else:
            run_tcp(args, cache)
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        cache.destroy()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
