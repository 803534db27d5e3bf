#!/usr/bin/env python3
"""
Interactive Test Client for Memory Cache

A simple command-line client for manually testing the memory cache server.

Usage:
    python scripts/client.py                  # Connect to localhost:7171
    python scripts/client.py --host 1.2.3.4   # Connect to specific host
    python scripts/client.py --port 8080      # Connect to specific port

Commands:
    SET <key> <json>            - Store a value with the default TTL
    SETEX <key> <ttl> <json>    - Store a value with a TTL in seconds
    GET <key>                   - Retrieve a value
    DELETE <key>                - Delete a key
    CLEAR                       - Delete all keys
    STATS                       - Show cache statistics
    QUIT                        - Close connection
    help                        - Show this help
    exit                        - Exit client
"""

import argparse
import json
import socket
import sys

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


class MemoryCacheClient:
    """Simple TCP client for the memory cache."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket = None

    def connect(self) -> bool:
        """Connect to the server."""
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
            return True
        except OSError as e:
            print(f"Connection error: {e}")
            return False

    def disconnect(self):
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def send_command(self, command: str) -> str:
        """Send a command and receive response."""
        if not self.socket:
            return "ERROR: Not connected"

        try:
            if not command.endswith('\n'):
                command += '\n'

            self.socket.sendall(command.encode('utf-8'))

            response = b''
            while not response.endswith(b'\n'):
                chunk = self.socket.recv(4096)
                if not chunk:
                    return "ERROR: Connection closed by server"
                response += chunk

            return response.decode('utf-8').strip()

        except socket.timeout:
            return "ERROR: Request timed out"
        except OSError as e:
            return f"ERROR: {e}"

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def pretty(response: str) -> str:
    """Pretty-print JSON payloads of OK responses."""
    status, _, body = response.partition(" ")
    if status != "OK" or not body:
        return response
    try:
        return f"{status}\n{json.dumps(json.loads(body), indent=2)}"
    except ValueError:
        return response


def print_help():
    """Print help message."""
    print("""
Memory Cache Commands:
----------------------
  SET <key> <json>            Store a JSON value with the default TTL
  SETEX <key> <ttl> <json>    Store a JSON value with a TTL in seconds
  GET <key>                   Retrieve the value for a key
  DELETE <key>                Delete a key
  CLEAR                       Delete all keys
  STATS                       Show cache statistics
  QUIT                        Close connection and exit

Client Commands:
----------------
  help                        Show this help message
  exit                        Exit the client
  reconnect                   Reconnect to the server
  status                      Show connection status

Examples:
---------
  SET greeting "hello world"  Store a string
  SETEX user:1 60 {"id": 1}   Store an object for 60 seconds
  GET user:1                  Get value for "user:1"
  STATS                       Hit rate, entry count, size estimate
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for Memory Cache"
    )
    parser.add_argument("--host", type=str, default="localhost", help="Server host (default: localhost)")
    parser.add_argument("--port", type=int, default=7171, help="Server port (default: 7171)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Socket timeout in seconds (default: 5.0)")

    args = parser.parse_args()

    print("Memory Cache Client")
    print("===================")
    print(f"Connecting to {args.host}:{args.port}...")

    client = MemoryCacheClient(args.host, args.port, args.timeout)

    if not client.connect():
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m memory_cache.server --port {args.port}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()

                if not command:
                    continue

                lower_cmd = command.lower()

                if lower_cmd == "help":
                    print_help()
                    continue

                if lower_cmd in ("exit", "quit"):
                    try:
                        client.send_command("QUIT")
                    except OSError:
                        pass
                    print("Goodbye!")
                    break

                if lower_cmd == "reconnect":
                    client.disconnect()
                    if client.connect():
                        print("Reconnected!")
                    else:
                        print("Reconnection failed.")
                    continue

                if lower_cmd == "status":
                    status = "Connected" if client.socket else "Disconnected"
                    print(f"Status: {status}")
                    print(f"Server: {args.host}:{args.port}")
                    continue

                print(pretty(client.send_command(command)))

            except EOFError:
                print("\nGoodbye!")
                break

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
