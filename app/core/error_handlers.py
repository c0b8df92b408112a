# app/core/error_handlers.py
"""Translate domain and framework errors into JSON responses"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import AppointmentError, InternalError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


async def appointment_error_handler(request: Request, exc: AppointmentError):
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        message = GENERIC_ERROR_MESSAGE
    else:
        logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        message = exc.message

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": message, "error": exc.error_code},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing request fields are a 400, like other validation failures"""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "error": "validation_error",
        },
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": GENERIC_ERROR_MESSAGE, "error": InternalError.error_code},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": GENERIC_ERROR_MESSAGE, "error": InternalError.error_code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppointmentError, appointment_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
