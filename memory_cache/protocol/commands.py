"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands and responses.
"""

import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional


class CommandType(Enum):
    """Enumeration of supported command types."""
    SET = auto()
    GET = auto()
    DELETE = auto()
    CLEAR = auto()
    STATS = auto()
    QUIT = auto()
    UNKNOWN = auto()


class ResponseStatus(Enum):
    """Enumeration of response statuses."""
    OK = "OK"
    ERROR = "ERROR"


def encode_value(value: Any) -> str:
    """Encode a value as compact single-line JSON."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=repr)


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command
        key: The key for the operation (empty for CLEAR, STATS, QUIT)
        value: The decoded JSON value for SET operations
        ttl: Time-to-live in seconds for SET (None = cache default)
        raw: The original raw command string
    """
    type: CommandType
    key: str = ""
    value: Any = None
    ttl: Optional[float] = None
    raw: str = ""

    @property
    def is_valid(self) -> bool:
        """Check if the command is valid for its type."""
        if self.type == CommandType.UNKNOWN:
            return False
        if self.type in (CommandType.SET, CommandType.GET, CommandType.DELETE):
            return bool(self.key)
        return True


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK or ERROR
        message: Response message or error description
        value: Encoded JSON payload (for GET and STATS operations)
    """
    status: ResponseStatus
    message: str = ""
    value: Optional[str] = None

    @classmethod
    def ok(cls, message: str = "", value: Optional[str] = None) -> "Response":
        """Create a successful response."""
        return cls(status=ResponseStatus.OK, message=message, value=value)

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, message=message)

    @classmethod
    def stored(cls) -> "Response":
        """Create a 'stored' response for SET operations."""
        return cls.ok(message="stored")

    @classmethod
    def deleted(cls) -> "Response":
        """Create a 'deleted' response for DELETE operations."""
        return cls.ok(message="deleted")

    @classmethod
    def cleared(cls) -> "Response":
        """Create a 'cleared' response for CLEAR operations."""
        return cls.ok(message="cleared")

    @classmethod
    def key_not_found(cls) -> "Response":
        """Create a 'key not found' error response."""
        return cls.error(message="key not found")

    @classmethod
    def value_response(cls, value: Any) -> "Response":
        """Create a GET response carrying the JSON-encoded value."""
        return cls.ok(value=encode_value(value))

    @classmethod
    def stats_response(cls, stats: Dict[str, Any]) -> "Response":
        """Create a STATS response carrying the JSON-encoded stats."""
        return cls.ok(value=encode_value(stats))
