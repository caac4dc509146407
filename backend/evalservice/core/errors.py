"""
Domain errors raised by the stores and how they are rendered over HTTP.

Every error body carries a stable ``errorKey`` so callers can branch on it
without parsing messages.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class EvalServiceError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    error_key: str = "badRequest"

    def __init__(self, detail: str | None = None, **context):
        super().__init__(detail or self.error_key)
        self.detail = detail
        self.context = context


class NotFoundError(EvalServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error_key = "notFound"


class ConflictError(EvalServiceError):
    error_key = "conflict"


class PolicyExistsError(ConflictError):
    error_key = "policyExists"


class SystemExistsError(ConflictError):
    error_key = "systemExists"


class EvaluationItemExistsError(ConflictError):
    error_key = "evaluationItemExists"


class PolicyViolationError(EvalServiceError):
    error_key = "policyViolation"

    def __init__(self, violations: list[dict]):
        super().__init__("Evaluation groups do not satisfy the subject policy")
        self.violations = violations


def _error_body(error_key: str, **extra) -> dict:
    return {"success": False, "errorKey": error_key, **extra}


async def eval_service_error_handler(_request: Request, exc: EvalServiceError) -> JSONResponse:
    extra = {}
    if exc.detail:
        extra["detail"] = exc.detail
    if isinstance(exc, PolicyViolationError):
        extra["violations"] = exc.violations
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error_key, **extra))


async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("badRequest", errors=jsonable_encoder(exc.errors())),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("serverError"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EvalServiceError, eval_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
