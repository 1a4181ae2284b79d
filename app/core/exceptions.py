"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

class MedbookException(HTTPException):
    """Base exception class for the order service"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(MedbookException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(MedbookException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenException(MedbookException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(MedbookException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(MedbookException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class ServiceUnavailableException(MedbookException):
    """503 Service Unavailable"""

    def __init__(
        self,
        service_name: str,
        error_code: str = "SERVICE_UNREACHABLE"
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{service_name} is unreachable",
            error_code=error_code
        )

# Business logic exceptions
class InvalidPaymentProviderException(BadRequestException):
    """Payment provider is not supported"""

    def __init__(self, provider: str):
        super().__init__(
            detail=f"{provider} is not a valid payment provider",
            error_code="INVALID_PAYMENT_PROVIDER"
        )

class OrderNotCancellableException(NotFoundException):
    """Order is missing, not owned, already cancelled or not reserved"""

    def __init__(self, detail: str = "Order not found or cannot be cancelled in its current status"):
        super().__init__(
            detail=detail,
            error_code="ORDER_NOT_CANCELLABLE"
        )

class DeliveryAddressOwnershipException(ForbiddenException):
    """Delivery address belongs to another patient"""

    def __init__(self, detail: str = "Patient does not own this delivery address"):
        super().__init__(
            detail=detail,
            error_code="FORBIDDEN_RESOURCE"
        )

def _error_response(status_code: int, message: str, error_code: Optional[str], headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"data": None, "message": message, "error_code": error_code},
        headers=headers,
    )

async def medbook_exception_handler(request: Request, exc: MedbookException) -> JSONResponse:
    return _error_response(exc.status_code, exc.detail, exc.error_code, exc.headers)

async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations reported by the database"""
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return _error_response(
        status.HTTP_409_CONFLICT,
        "Request violates a database constraint",
        "CONFLICT",
    )

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MedbookException, medbook_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
