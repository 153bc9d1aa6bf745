"""
Error taxonomy for record and query operations.
Every error is terminal for the operation that raised it.
"""

import json

ORDINALS = ["1st", "2nd", "3rd", "4th", "5th", "6th"]


def ordinal(position: int) -> str:
    """Return the English ordinal for a 1-based argument position."""
    if 1 <= position <= len(ORDINALS):
        return ORDINALS[position - 1]
    return f"{position}th"


class InfoShareError(Exception):
    """Base class for all record-service errors."""

    @property
    def message(self) -> str:
        return str(self)


class ArgumentCountError(InfoShareError):
    """Wrong number of positional arguments."""


class ArgumentEmptyError(InfoShareError):
    """A required positional argument is blank."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"{ordinal(position)} argument must be a non-empty string")


class DuplicateKeyError(InfoShareError):
    """Create was called for an id that already exists."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"This info already exists: {key}")


class NotFoundError(InfoShareError):
    """Read of a missing or unreadable id, reported as a JSON payload."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(self.payload.decode("utf-8"))

    @property
    def payload(self) -> bytes:
        return json.dumps({"Error": self.reason}, separators=(",", ":")).encode("utf-8")


class BackendError(InfoShareError):
    """A get, put or query call against the state backend failed."""


class SelectorError(BackendError):
    """The backend rejected a selector as malformed."""


class KeyExistsError(BackendError):
    """A put targeted a key that already holds a value."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key already exists: {key}")


class SerializationError(InfoShareError):
    """A record could not be encoded."""
