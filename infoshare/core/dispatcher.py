"""
Operation dispatcher - routes a named function with string arguments to the
record store or the query engine and wraps the outcome in a Response.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from .backend import IStateBackend
from .errors import BackendError, InfoShareError, SerializationError
from .query import encode_query_results, query_by_category, query_by_group, query_by_submitter
from .store import create_info, read_info
from ..util.logging import logger

OK = 200
ERROR = 500

UNKNOWN_FUNCTION_MESSAGE = "Received unknown function invocation"


@dataclass
class Response:
    status: int
    payload: bytes = b""
    message: str = ""
    error_type: str = ""

    @property
    def ok(self) -> bool:
        return self.status < 400


def success(payload: bytes = None) -> Response:
    return Response(status=OK, payload=payload or b"")


def error(message: str, error_type: str = "") -> Response:
    return Response(status=ERROR, message=message, error_type=error_type)


def _create(backend: IStateBackend, args: List[str]) -> bytes:
    create_info(backend, args)
    return b""


def _query(query_fn) -> Callable[[IStateBackend, List[str]], bytes]:
    def run(backend: IStateBackend, args: List[str]) -> bytes:
        return encode_query_results(query_fn(backend, args))
    return run


OPERATIONS: Dict[str, Callable[[IStateBackend, List[str]], bytes]] = {
    "create": _create,
    "readById": read_info,
    "queryByCategory": _query(query_by_category),
    "queryBySubmitter": _query(query_by_submitter),
    "queryByGroup": _query(query_by_group),
}

# Function names used by existing clients
ALIASES = {
    "initInfo": "create",
    "readInfo": "readById",
    "queryInfoByInfoType": "queryByCategory",
    "queryInfoByUploader": "queryBySubmitter",
    "queryInfoByDepartment": "queryByGroup",
    "queryByInfoType": "queryByCategory",
    "queryByUploader": "queryBySubmitter",
    "queryByDepartment": "queryByGroup",
}


def resolve(function: str) -> str:
    """Map a function name or alias to its canonical operation name."""
    return ALIASES.get(function, function)


def init() -> Response:
    """Instantiation hook. Nothing to set up."""
    return success()


def invoke(backend: IStateBackend, function: str, args: List[str]) -> Response:
    """Run a named operation and return a success or error Response."""
    logger.debug(f"invoke is running {function}")

    operation = OPERATIONS.get(resolve(function))
    if operation is None:
        logger.log_dispatch(function, len(args), status="rejected", details={"error": "unknown_function"})
        return error(UNKNOWN_FUNCTION_MESSAGE, "UnknownFunction")

    try:
        payload = operation(backend, list(args))
    except InfoShareError as e:
        status = "failed" if isinstance(e, (BackendError, SerializationError)) else "rejected"
        logger.log_dispatch(function, len(args), status=status, details={"error": type(e).__name__})
        return error(e.message, type(e).__name__)

    logger.log_dispatch(function, len(args))
    return success(payload)
