"""
Centralized exception handling for the application
"""
from fastapi import HTTPException, status
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class BaseAppException(Exception):
    """Base exception for application-specific errors"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(BaseAppException):
    """Raised when input validation fails"""
    pass


class InvalidEntryError(ValidationError):
    """Raised when an entry violates its structural rules (amount, date)"""
    pass


class InvalidFilterError(ValidationError):
    """Raised when a ledger filter or grouping cannot be interpreted"""
    pass


class ArithmeticOverflowError(BaseAppException):
    """Raised when a ledger total leaves the representable minor-unit range"""
    pass


class NotFoundError(BaseAppException):
    """Raised when a requested resource is not found"""
    pass


class AuthenticationError(BaseAppException):
    """Raised when the acting member cannot be identified"""
    pass


class DatabaseError(BaseAppException):
    """Raised when database operations fail"""
    pass


# HTTP Exception Mappings
def map_exception_to_http_exception(exc: BaseAppException) -> HTTPException:
    """Map application exceptions to HTTP exceptions"""

    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "details": exc.details}
        )

    elif isinstance(exc, ArithmeticOverflowError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "details": exc.details}
        )

    elif isinstance(exc, NotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": exc.message, "details": exc.details}
        )

    elif isinstance(exc, AuthenticationError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": exc.message, "details": exc.details}
        )

    elif isinstance(exc, DatabaseError):
        logger.error(f"Database error: {exc.message}", extra={"details": exc.details})
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "A database error occurred", "details": {}}
        )

    else:
        logger.error(f"Unhandled application error: {exc.message}", extra={"details": exc.details})
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "An unexpected error occurred", "details": {}}
        )


# Common exception raising functions for convenience
def raise_not_found(resource: str, identifier: str = None) -> None:
    """Raise a not found error for a specific resource"""
    message = f"{resource} not found"
    if identifier:
        message += f" with id: {identifier}"
    raise NotFoundError(message, {"resource": resource, "identifier": identifier})


def raise_invalid_entry(field: str, message: str, value: Any = None) -> None:
    """Raise an invalid entry error for a specific field"""
    raise InvalidEntryError(
        f"Invalid entry {field}: {message}",
        {"field": field, "message": message, "value": None if value is None else str(value)}
    )


def raise_invalid_filter(field: str, message: str, value: Any = None) -> None:
    """Raise an invalid filter error for a specific parameter"""
    raise InvalidFilterError(
        f"Invalid filter {field}: {message}",
        {"field": field, "message": message, "value": None if value is None else str(value)}
    )
