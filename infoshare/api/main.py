"""
HTTP surface for the info record service.
Thin routing over the record store, query engine and dispatcher.
"""

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse, Response

from .schemas import (
    InfoCreateRequest,
    InfoCreateResponse,
    InvokeRequest,
    ErrorResponse,
    HealthResponse,
)
from ..core.backend import IStateBackend
from ..core.config import VERSION, debug_enabled, get_state_backend, get_state_backend_name
from ..core.dispatcher import invoke
from ..core.errors import BackendError, InfoShareError, NotFoundError
from ..core.query import count_records, encode_query_results, query_by_attribute
from ..core.store import create_info, read_info
from ..util.logging import logger

JSON_MEDIA_TYPE = "application/json"

ERROR_STATUS_CODES = {
    "ArgumentCountError": 400,
    "ArgumentEmptyError": 400,
    "DuplicateKeyError": 409,
    "NotFoundError": 404,
    "UnknownFunction": 400,
}

_backend = None


def get_backend() -> IStateBackend:
    """Shared backend built from configuration on first use."""
    global _backend
    if _backend is None:
        _backend = get_state_backend()
        logger.info(f"State backend initialized: {_backend.__class__.__name__}")
    return _backend


# Initialize the FastAPI application
app = FastAPI(
    title="InfoShare API",
    version=VERSION,
    description="Write-once info records with attribute-filtered queries",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)


@app.exception_handler(InfoShareError)
async def info_share_error_handler(request: Request, exc: InfoShareError):
    if isinstance(exc, NotFoundError):
        # Structured payload is returned exactly as produced by the store
        return Response(content=exc.payload, status_code=404, media_type=JSON_MEDIA_TYPE)

    status_code = ERROR_STATUS_CODES.get(type(exc).__name__, 500)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error_type=type(exc).__name__, message=exc.message).model_dump()
    )


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(backend: IStateBackend = Depends(get_backend)):
    """Check system health."""
    try:
        record_count = count_records(backend)
        status = "healthy"
    except BackendError as e:
        logger.error(f"Health check failed: {e}")
        record_count = 0
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=VERSION,
        backend=get_state_backend_name(),
        record_count=record_count
    )


@app.post("/info", response_model=InfoCreateResponse, status_code=201)
def create_info_endpoint(request: InfoCreateRequest, backend: IStateBackend = Depends(get_backend)):
    """Create a new write-once info record."""
    create_info(backend, request.as_args())
    return InfoCreateResponse(success=True, id=request.id)


@app.get("/info/category/{value}")
def query_by_category_endpoint(value: str, backend: IStateBackend = Depends(get_backend)):
    results = query_by_attribute(backend, "category", [value])
    return Response(content=encode_query_results(results), media_type=JSON_MEDIA_TYPE)


@app.get("/info/submitter/{value}")
def query_by_submitter_endpoint(value: str, backend: IStateBackend = Depends(get_backend)):
    results = query_by_attribute(backend, "submitter", [value])
    return Response(content=encode_query_results(results), media_type=JSON_MEDIA_TYPE)


@app.get("/info/group/{value}")
def query_by_group_endpoint(value: str, backend: IStateBackend = Depends(get_backend)):
    results = query_by_attribute(backend, "group", [value])
    return Response(content=encode_query_results(results), media_type=JSON_MEDIA_TYPE)


@app.get("/info/{info_id}")
def read_info_endpoint(info_id: str, backend: IStateBackend = Depends(get_backend)):
    """Return the stored record bytes unmodified."""
    return Response(content=read_info(backend, [info_id]), media_type=JSON_MEDIA_TYPE)


@app.post("/invoke")
def invoke_endpoint(request: InvokeRequest, backend: IStateBackend = Depends(get_backend)):
    """Dispatch a named operation with positional string arguments."""
    result = invoke(backend, request.function, request.args)

    if result.ok:
        return Response(content=result.payload, media_type=JSON_MEDIA_TYPE if result.payload else None)

    if result.error_type == "NotFoundError":
        # Same body as GET /info/{id}
        return Response(content=result.message.encode("utf-8"), status_code=404, media_type=JSON_MEDIA_TYPE)

    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(result.error_type, 500),
        content=ErrorResponse(error_type=result.error_type, message=result.message).model_dump()
    )
