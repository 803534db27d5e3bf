"""
Protocol Parser Module

This module handles parsing of raw protocol commands and formatting of responses.
"""

import json
import math

from .commands import Command, CommandType, Response
from ..config.settings import settings


class ProtocolParser:
    """
    Parser for the Memory Cache text protocol.

    Protocol Format:
        Request:  <COMMAND> [ARGS...]\n
        Response: <STATUS> [DATA]\n

    Commands:
        SET <key> <json>           -> OK stored
        SETEX <key> <ttl> <json>   -> OK stored
        GET <key>                  -> OK <json> | ERROR key not found
        DELETE <key>               -> OK deleted | ERROR key not found
        CLEAR                      -> OK cleared
        STATS                      -> OK <json>
        QUIT                       -> (connection closed)

    Constraints:
        - Keys: max 256 characters, no whitespace
        - Values: any JSON document; it may contain spaces but no newline
        - TTL: non-negative number of seconds (0 = expires immediately)
    """

    def __init__(self):
        """Initialize the parser with constraints from settings."""
        self.max_key_length = settings.MAX_KEY_LENGTH

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request string into a Command object.

        Args:
            data: Raw request string (may include trailing newline)

        Returns:
            Command object representing the parsed request.
            Returns Command with type=UNKNOWN for invalid/malformed requests.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request('SETEX user:1 60 {"name": "alice"}')
            >>> cmd.type == CommandType.SET
            True
            >>> cmd.value
            {'name': 'alice'}
            >>> cmd.ttl
            60.0
        """
        raw = data.strip()
        if not raw:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        command_name = raw.split(None, 1)[0].upper()

        if command_name == "SET":
            return self._parse_set(raw.split(None, 2), raw)
        if command_name == "SETEX":
            return self._parse_setex(raw.split(None, 3), raw)
        if command_name == "GET":
            return self._parse_keyed(CommandType.GET, raw.split(), raw)
        if command_name == "DELETE":
            return self._parse_keyed(CommandType.DELETE, raw.split(), raw)

        bare = {
            "CLEAR": CommandType.CLEAR,
            "STATS": CommandType.STATS,
            "QUIT": CommandType.QUIT,
        }
        if command_name in bare and len(raw.split()) == 1:
            return Command(type=bare[command_name], raw=raw)

        return Command(type=CommandType.UNKNOWN, raw=raw)

    def _valid_key(self, key: str) -> bool:
        return 0 < len(key) <= self.max_key_length

    def _parse_set(self, parts: list, raw: str) -> Command:
        """
        Parse a SET command.

        Format: SET <key> <json>
        """
        if len(parts) != 3 or not self._valid_key(parts[1]):
            return Command(type=CommandType.UNKNOWN, raw=raw)

        try:
            value = json.loads(parts[2])
        except ValueError:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        return Command(type=CommandType.SET, key=parts[1], value=value, raw=raw)

    def _parse_setex(self, parts: list, raw: str) -> Command:
        """
        Parse a SETEX command.

        Format: SETEX <key> <ttl> <json>
        """
        if len(parts) != 4 or not self._valid_key(parts[1]):
            return Command(type=CommandType.UNKNOWN, raw=raw)

        try:
            ttl = float(parts[2])
            value = json.loads(parts[3])
        except ValueError:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        if ttl < 0 or not math.isfinite(ttl):
            return Command(type=CommandType.UNKNOWN, raw=raw)

        return Command(type=CommandType.SET, key=parts[1], value=value, ttl=ttl, raw=raw)

    def _parse_keyed(self, command_type: CommandType, parts: list, raw: str) -> Command:
        """
        Parse a GET or DELETE command.

        Format: GET <key> | DELETE <key>
        """
        if len(parts) != 2 or not self._valid_key(parts[1]):
            return Command(type=CommandType.UNKNOWN, raw=raw)

        return Command(type=command_type, key=parts[1], raw=raw)

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol string.

        Args:
            response: Response object to format

        Returns:
            Formatted response string WITH trailing newline.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.stored())
            'OK stored\\n'
            >>> parser.format_response(Response.value_response("hello"))
            'OK "hello"\\n'
            >>> parser.format_response(Response.error("key not found"))
            'ERROR key not found\\n'
        """
        prefix = response.status.value

        # If value is provided (GET/STATS), prefer it; otherwise use message
        if response.value is not None:
            body = response.value
        else:
            body = response.message

        if body:
            return f"{prefix} {body}\n"
        return f"{prefix}\n"
