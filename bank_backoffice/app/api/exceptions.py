from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import (
    BankError,
    BusinessRuleError,
    DuplicateEmailError,
    GenerationError,
    NotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

ERROR_TITLES = {
    "CustomerNotFoundError": "Customer Not Found",
    "AccountNotFoundError": "Account Not Found",
    "AlreadyClosedError": "Account Already Closed",
    "NonZeroBalanceError": "Non-Zero Balance",
    "InactiveAccountError": "Inactive Account",
    "InsufficientFundsError": "Insufficient Funds",
    "DuplicateEmailError": "Duplicate Email",
    "ValidationError": "Validation Failed",
    "GenerationError": "Account Number Generation Failed",
}


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    title = ERROR_TITLES.get(type(exc).__name__, "Internal Server Error")
    return JSONResponse(
        status_code=status_code,
        content={"error": title, "detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        logger.info("request.not_found", extra={"path": request.url.path, "reason": str(exc)})
        return _error_response(status.HTTP_404_NOT_FOUND, exc)

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("request.invalid", extra={"path": request.url.path, "reason": str(exc)})
        return _error_response(status.HTTP_400_BAD_REQUEST, exc)

    @app.exception_handler(DuplicateEmailError)
    async def duplicate_email_handler(
        request: Request, exc: DuplicateEmailError
    ) -> JSONResponse:
        logger.info("request.conflict", extra={"path": request.url.path, "reason": str(exc)})
        return _error_response(status.HTTP_409_CONFLICT, exc)

    @app.exception_handler(BusinessRuleError)
    async def business_rule_handler(
        request: Request, exc: BusinessRuleError
    ) -> JSONResponse:
        logger.info("request.rejected", extra={"path": request.url.path, "reason": str(exc)})
        return _error_response(status.HTTP_409_CONFLICT, exc)

    @app.exception_handler(GenerationError)
    async def generation_handler(request: Request, exc: GenerationError) -> JSONResponse:
        logger.error("request.generation_failed", extra={"path": request.url.path})
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)

    @app.exception_handler(BankError)
    async def bank_error_handler(request: Request, exc: BankError) -> JSONResponse:
        logger.error("request.failed", extra={"path": request.url.path}, exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation Failed",
                "detail": "Input validation failed",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.unhandled", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error", "detail": "An unexpected error occurred"},
        )
