"""Translation of domain and persistence errors into HTTP responses."""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.contract_service.domain.exceptions import ContractNotOwnedByClient, ValidationError
from src.contract_service.logging import get_logger
from src.service_client.schemas import ErrorResponse
from src.shared.exceptions import ConcurrentModification, ConflictingEntityFound, EntityNotFound

logger = get_logger(__name__)


def _error_response(status_code: int, error: Exception, **extra) -> JSONResponse:
    body = ErrorResponse(detail=str(error), **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.error(f"Rejected {request.method} {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, exc, kind=exc.kind.value, field=exc.field
    )


async def handle_not_found(request: Request, exc: EntityNotFound) -> JSONResponse:
    logger.error(f"Not found on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


async def handle_conflict(request: Request, exc: ConflictingEntityFound) -> JSONResponse:
    logger.error(f"Conflict on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def handle_concurrent_modification(request: Request, exc: ConcurrentModification) -> JSONResponse:
    logger.error(f"Concurrent modification on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def handle_not_owned(request: Request, exc: ContractNotOwnedByClient) -> JSONResponse:
    logger.error(f"Ownership check failed on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_403_FORBIDDEN, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register one handler per error family; subclasses resolve to their family's handler."""
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(EntityNotFound, handle_not_found)
    app.add_exception_handler(ConflictingEntityFound, handle_conflict)
    app.add_exception_handler(ConcurrentModification, handle_concurrent_modification)
    app.add_exception_handler(ContractNotOwnedByClient, handle_not_owned)
