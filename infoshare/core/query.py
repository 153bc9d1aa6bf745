"""
Query engine - equality-filter scans over info records.
Results are a point-in-time snapshot in backend order. They must not be used
to decide later writes without re-checking existence through the store.
"""

import json
from dataclasses import dataclass
from typing import Dict, List

from .backend import ISelectorQueryable
from .errors import ArgumentCountError, ArgumentEmptyError, BackendError
from .schema import DOC_TYPE, QUERYABLE_ATTRIBUTES, wire_field
from ..util.logging import logger


@dataclass
class QueryResult:
    """Envelope pairing a storage key with the record stored under it."""

    key: str
    record: bytes


def build_selector(attribute: str, value: str) -> Dict:
    """Selector matching info records whose attribute equals value."""
    if attribute not in QUERYABLE_ATTRIBUTES:
        raise ValueError(f"Attribute is not queryable: {attribute}")

    return {"selector": {"docType": DOC_TYPE, wire_field(attribute): value}}


def execute_selector(backend: ISelectorQueryable, selector: Dict) -> List[QueryResult]:
    """Run a selector and collect every result, or fail without partial results."""
    try:
        iterator = backend.query_by_selector(selector)
    except BackendError:
        raise
    except Exception as e:
        raise BackendError(f"Failed to execute selector query: {e}") from e

    results = []
    try:
        while iterator.has_next():
            kv = iterator.next()
            results.append(QueryResult(key=kv.key, record=kv.value))
    except BackendError:
        raise
    except Exception as e:
        raise BackendError(f"Failed to read query result: {e}") from e
    finally:
        iterator.close()

    return results


def query_by_attribute(backend: ISelectorQueryable, attribute: str, args: List[str]) -> List[QueryResult]:
    """Find every info record whose attribute equals the first argument, case-insensitively."""
    if len(args) < 1:
        raise ArgumentCountError("Incorrect number of arguments. Expecting 1")
    if not args[0]:
        raise ArgumentEmptyError(1)

    value = args[0].lower()
    selector = build_selector(attribute, value)
    logger.debug(f"Executing selector: {json.dumps(selector)}")

    try:
        results = execute_selector(backend, selector)
    except BackendError as e:
        logger.log_query_operation(attribute, value, status="failed", details={"error": str(e)})
        raise

    logger.log_query_operation(attribute, value, result_count=len(results))
    return results


def query_by_category(backend: ISelectorQueryable, args: List[str]) -> List[QueryResult]:
    return query_by_attribute(backend, "category", args)


def query_by_submitter(backend: ISelectorQueryable, args: List[str]) -> List[QueryResult]:
    return query_by_attribute(backend, "submitter", args)


def query_by_group(backend: ISelectorQueryable, args: List[str]) -> List[QueryResult]:
    return query_by_attribute(backend, "group", args)


def encode_query_results(results: List[QueryResult]) -> bytes:
    """Encode results as a JSON array of {"Key", "Record"} envelopes.

    Records are embedded as stored, not re-encoded as strings.
    """
    members = [
        b'{"Key":' + json.dumps(result.key).encode("utf-8") + b', "Record":' + result.record + b'}'
        for result in results
    ]
    return b"[" + b",".join(members) + b"]"


def count_records(backend: ISelectorQueryable) -> int:
    """Count every info record in the backend."""
    return len(execute_selector(backend, {"selector": {"docType": DOC_TYPE}}))
