"""
Global error handlers
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from possessao.utils.config import settings
from possessao.utils.exceptions import PossessaoException
from possessao.utils.logger import get_logger

logger = get_logger(__name__)


async def possessao_exception_handler(request: Request, exc: PossessaoException):
    """Handle application exceptions"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.__class__.__name__}: {exc.message}", extra={
        "status_code": exc.status_code,
        "details": exc.details,
        "path": request.url.path
    })

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message,
            "error_type": exc.__class__.__name__,
            "details": exc.details
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"Validation error on {request.url.path}", extra={
        "path": request.url.path,
        "errors": errors
    })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": "Validation error",
            "error_type": "ValidationError",
            "details": {"errors": errors}
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP exception: {exc.detail}", extra={
        "status_code": exc.status_code,
        "path": request.url.path
    })

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "error_type": "HTTPException"
        }
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected exception: {str(exc)}", exc_info=True, extra={
        "path": request.url.path
    })

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "error_type": "InternalServerError",
            "details": {"message": str(exc)} if settings.DEBUG else {}
        }
    )
