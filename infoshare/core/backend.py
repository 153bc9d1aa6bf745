"""
Key-value state backend boundary.
The record store needs get/put; the query engine needs selector queries.
Both are declared here as abstract capabilities, with an in-memory
implementation that follows the same equality-selector semantics as SQLite.
"""

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import BackendError, KeyExistsError, SelectorError


@dataclass
class KV:
    """A single (key, value) pair yielded by a state query."""

    key: str
    """Storage key of the matching value"""

    value: bytes
    """Stored bytes, exactly as written"""


class IStateQueryIterator(ABC):
    """Lazy sequence of query results. Must be closed once consumed."""

    @abstractmethod
    def has_next(self) -> bool:
        pass

    @abstractmethod
    def next(self) -> KV:
        """Return the next result. Raises BackendError on iteration failure."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release any resources held by the iterator."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class IStateStore(ABC):
    """Point access to the key-value state."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes, or None when the key is absent."""
        pass

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Insert bytes under a new key. Raises KeyExistsError if the key is taken."""
        pass


class ISelectorQueryable(ABC):
    """Secondary-index query capability."""

    @abstractmethod
    def query_by_selector(self, selector: Dict) -> IStateQueryIterator:
        """Execute an equality selector and return a result iterator."""
        pass


class IStateBackend(IStateStore, ISelectorQueryable):
    """A state store that also answers selector queries."""


def selector_fields(selector: Dict) -> Dict[str, str]:
    """Validate a selector document and return its field -> value predicates.

    A selector has the shape ``{"selector": {"<field>": "<value>", ...}}``.
    Only flat string equality is supported; anything else is malformed.
    """
    if not isinstance(selector, dict) or set(selector) != {"selector"}:
        raise SelectorError(f"Malformed selector: {selector!r}")

    fields = selector["selector"]
    if not isinstance(fields, dict) or not fields:
        raise SelectorError(f"Malformed selector: {selector!r}")

    for field, value in fields.items():
        if not isinstance(field, str) or not field or not isinstance(value, str):
            raise SelectorError(f"Selector predicate must be string equality: {field!r}")

    return fields


def matches_selector(value: bytes, fields: Dict[str, str]) -> bool:
    """Check whether stored bytes decode to a JSON object matching every field."""
    try:
        document = json.loads(value)
    except (TypeError, ValueError):
        return False

    if not isinstance(document, dict):
        return False

    return all(document.get(field) == expected for field, expected in fields.items())


class ListQueryIterator(IStateQueryIterator):
    """Iterator over a pre-computed snapshot of results."""

    def __init__(self, results: List[KV]):
        self._results = results
        self._position = 0
        self.closed = False

    def has_next(self) -> bool:
        return not self.closed and self._position < len(self._results)

    def next(self) -> KV:
        if self.closed:
            raise BackendError("Query iterator is closed")
        if self._position >= len(self._results):
            raise BackendError("Query iterator is exhausted")

        result = self._results[self._position]
        self._position += 1
        return result

    def close(self) -> None:
        self.closed = True


class InMemoryStateBackend(IStateBackend):
    """Dict-backed state backend. Query results follow insertion order."""

    def __init__(self):
        self._state = {}  # key -> bytes
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        return self._state.get(key)

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise BackendError("key must not be empty")
        with self._lock:
            if key in self._state:
                raise KeyExistsError(key)
            self._state[key] = bytes(value)

    def query_by_selector(self, selector: Dict) -> IStateQueryIterator:
        fields = selector_fields(selector)
        snapshot = [
            KV(key=key, value=value)
            for key, value in list(self._state.items())
            if matches_selector(value, fields)
        ]
        return ListQueryIterator(snapshot)

    def __len__(self) -> int:
        return len(self._state)
