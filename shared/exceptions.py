"""
Custom exceptions and error handling utilities.

This module centralizes all custom exceptions used throughout the application
and provides utilities for consistent error handling and reporting.
"""

from typing import Dict, Any, Optional
import logging


# =================== BASE EXCEPTIONS ===================

class QuoteDeskError(Exception):
    """Base exception for all QuoteDesk application errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = None,
        details: Dict[str, Any] = None,
        original_exception: Exception = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.replace("Error", "").lower()
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            "error": self.message,
            "code": self.code,
            "type": self.__class__.__name__
        }

        if self.details:
            result["details"] = self.details

        return result


# =================== VALIDATION EXCEPTIONS ===================

class ValidationError(QuoteDeskError):
    """Raised when input is malformed, missing or internally inconsistent."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Dict[str, Any] = None
    ):
        merged = dict(details or {})
        if field:
            merged.setdefault("field", field)
        super().__init__(message=message, code="validation_error", details=merged)
        self.field = field


# =================== REPOSITORY EXCEPTIONS ===================

class NotFoundError(QuoteDeskError):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    def __init__(self, entity_type: str, identifier: Any, details: Dict[str, Any] = None):
        message = f"{entity_type} not found: {identifier}"
        super().__init__(
            message=message,
            code="not_found",
            details={
                "entityType": entity_type,
                "identifier": str(identifier),
                **(details or {})
            }
        )
        self.entity_type = entity_type
        self.identifier = identifier


class ConflictError(QuoteDeskError):
    """Raised when a write would violate a uniqueness or ownership rule."""

    status_code = 409

    def __init__(
        self,
        message: str,
        details: Dict[str, Any] = None,
        original_exception: Exception = None
    ):
        super().__init__(
            message=message,
            code="conflict",
            details=details,
            original_exception=original_exception
        )


# =================== SEQUENCE EXCEPTIONS ===================

class SequenceExhaustedError(QuoteDeskError):
    """Raised when no free quotation number was found within the attempt bound."""

    status_code = 500

    def __init__(self, attempts: int, last_candidate: Optional[str] = None):
        super().__init__(
            message=f"Could not allocate a unique quotation number after {attempts} attempts",
            code="sequence_exhausted",
            details={"attempts": attempts, "lastCandidate": last_candidate}
        )
        self.attempts = attempts
        self.last_candidate = last_candidate


# =================== ERROR HANDLING UTILITIES ===================

def handle_exception(
    exception: Exception,
    logger: logging.Logger,
    context: Dict[str, Any] = None,
    reraise: bool = False
) -> Dict[str, Any]:
    """
    Centralized exception handling utility.

    Args:
        exception: The exception to handle
        logger: Logger instance for error reporting
        context: Additional context information
        reraise: Whether to re-raise the exception

    Returns:
        Dictionary representation of the error
    """
    if isinstance(exception, QuoteDeskError):
        error_dict = exception.to_dict()
        log = logger.error if exception.status_code >= 500 else logger.info
        log(f"{exception.__class__.__name__}: {exception.message}", extra={
            "error_code": exception.code,
            "details": exception.details,
            "context": context
        })
    else:
        error_dict = {
            "error": "Internal server error",
            "code": "unexpected_error",
            "type": exception.__class__.__name__
        }
        logger.error(f"Unexpected error: {str(exception)}", extra={
            "exception_type": exception.__class__.__name__,
            "context": context
        }, exc_info=exception)

    if context:
        error_dict["context"] = context

    if reraise:
        raise exception

    return error_dict


def create_error_response(
    exception: Exception,
    include_details: bool = True
) -> Dict[str, Any]:
    """
    Create standardized error response from exception.

    Args:
        exception: The exception to convert
        include_details: Whether to include detailed error information

    Returns:
        Standardized error response dictionary
    """
    if isinstance(exception, QuoteDeskError):
        response = {
            "error": exception.message,
            "code": exception.code
        }

        if include_details and exception.details:
            response.update(exception.details)

        return response
    return {
        "error": "Internal server error",
        "code": "unexpected_error"
    }


def status_code_for(exception: Exception) -> int:
    """HTTP status for an exception; unknown exceptions map to 500."""
    return getattr(exception, "status_code", 500) if isinstance(exception, QuoteDeskError) else 500


# =================== EXPORT ALL EXCEPTIONS ===================

__all__ = [
    "QuoteDeskError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "SequenceExhaustedError",
    "handle_exception",
    "create_error_response",
    "status_code_for",
]
