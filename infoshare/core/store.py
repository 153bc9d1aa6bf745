"""
Record store scope only. Do not add update or delete paths here.
Info records are write-once: create persists a record exactly once under its
id, read returns the stored bytes untouched.
"""

from typing import List, Sequence

from .backend import IStateStore
from .errors import (
    ArgumentCountError,
    ArgumentEmptyError,
    BackendError,
    DuplicateKeyError,
    KeyExistsError,
    NotFoundError,
)
from .schema import InfoRecord
from ..util.logging import logger

CREATE_ARG_COUNT = 6


def _require_non_empty(args: Sequence[str]):
    for position, arg in enumerate(args, start=1):
        if not arg:
            raise ArgumentEmptyError(position)


def create_info(backend: IStateStore, args: List[str]) -> None:
    """Create a new info record from six positional string arguments.

    Arguments are ``id, category, content, timestamp, submitter, group``.
    Category, submitter and group are lowercased before storage.
    """
    if len(args) != CREATE_ARG_COUNT:
        raise ArgumentCountError(f"Incorrect number of arguments. Expecting {CREATE_ARG_COUNT}")

    try:
        _require_non_empty(args)
    except ArgumentEmptyError as e:
        logger.log_record_operation("create", args[0], status="rejected", details={"error": str(e)})
        raise

    record = InfoRecord.normalized(*args)

    # Check if info already exists
    try:
        existing = backend.get(record.id)
    except BackendError as e:
        logger.log_record_operation("create", record.id, status="failed", details={"error": str(e)})
        raise BackendError(f"Failed to get info: {e}") from e

    if existing is not None:
        logger.log_record_operation("create", record.id, status="rejected", details={"error": "duplicate"})
        raise DuplicateKeyError(record.id)

    data = record.to_json()

    try:
        backend.put(record.id, data)
    except KeyExistsError as e:
        # Lost a race with a concurrent create of the same id
        logger.log_record_operation("create", record.id, status="rejected", details={"error": "duplicate"})
        raise DuplicateKeyError(record.id) from e
    except BackendError as e:
        logger.log_record_operation("create", record.id, status="failed", details={"error": str(e)})
        raise

    logger.log_record_operation("create", record.id, content=record.content, details={
        "category": record.category,
        "submitter": record.submitter,
        "group": record.group,
    })


def create_record(backend: IStateStore, record_id: str, category: str, content: str, timestamp: str,
                  submitter: str, group: str) -> None:
    """Keyword-friendly wrapper around create_info."""
    create_info(backend, [record_id, category, content, timestamp, submitter, group])


def read_info(backend: IStateStore, args: List[str]) -> bytes:
    """Return the stored bytes for a single id argument."""
    if len(args) != 1:
        raise ArgumentCountError("Incorrect number of arguments. Expecting ID of the info to query")
    _require_non_empty(args)

    record_id = args[0]
    try:
        value = backend.get(record_id)
    except BackendError as e:
        logger.log_record_operation("read", record_id, status="failed", details={"error": str(e)})
        raise NotFoundError(record_id, f"Failed to get state for {record_id}") from e

    if value is None:
        logger.log_record_operation("read", record_id, status="rejected", details={"error": "not_found"})
        raise NotFoundError(record_id, f"Info does not exist: {record_id}")

    logger.log_record_operation("read", record_id)
    return value


def read_record(backend: IStateStore, record_id: str) -> InfoRecord:
    """Read and decode a record."""
    return InfoRecord.from_json(read_info(backend, [record_id]))
