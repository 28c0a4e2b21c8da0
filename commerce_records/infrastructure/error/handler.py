"""
Error handling module for the record adapters.
Provides centralized categorisation and logging of transport failures.
"""
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from commerce_records.core.exceptions import (
    RateLimitError,
    RecordNotFound,
    TransportError,
)


class ErrorCategory(str, Enum):
    """Categorization of errors for processing and reporting."""
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    CONNECTION = "connection"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorDetails(BaseModel):
    """Structured error details for consistency in logging and reporting."""
    timestamp: datetime
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    source: str
    error_code: Optional[str] = None
    http_status_code: Optional[int] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    stacktrace: Optional[str] = None


class ErrorHandler:
    """
    Categorises adapter errors and logs them at a level matching their
    severity. Errors are reported, never swallowed: callers re-raise.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def handle_error(
        self,
        exception: Exception,
        source: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorDetails:
        """
        Categorise and log an error.

        Args:
            exception: The exception that occurred
            source: Source identifier (e.g. "PriceList adapter")
            context: Additional context about the error

        Returns:
            ErrorDetails: Structured details about the error
        """
        error_details = self.categorize_error(exception, source, context or {})
        self.log_error(error_details)
        return error_details

    def categorize_error(
        self,
        exception: Exception,
        source: str,
        context: Dict[str, Any],
    ) -> ErrorDetails:
        category = ErrorCategory.UNKNOWN
        severity = ErrorSeverity.MEDIUM
        http_status_code = getattr(exception, "status_code", None)

        if isinstance(exception, RateLimitError):
            category = ErrorCategory.RATE_LIMIT
        elif isinstance(exception, RecordNotFound):
            category, severity = ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.LOW
        elif isinstance(exception, TransportError):
            if http_status_code is None:
                category = ErrorCategory.CONNECTION
            elif http_status_code in (401, 403):
                category, severity = ErrorCategory.AUTHENTICATION, ErrorSeverity.HIGH
            elif http_status_code == 404:
                category, severity = ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.LOW
            elif http_status_code == 422:
                category, severity = ErrorCategory.VALIDATION, ErrorSeverity.LOW
            else:
                category = ErrorCategory.EXTERNAL_API
                if http_status_code >= 500:
                    severity = ErrorSeverity.HIGH

        stacktrace = None
        if exception.__traceback__ is not None:
            stacktrace = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))

        return ErrorDetails(
            timestamp=datetime.now(timezone.utc),
            category=category,
            severity=severity,
            message=str(exception),
            source=source,
            error_code=getattr(exception, "code", None),
            http_status_code=http_status_code,
            context=context,
            stacktrace=stacktrace,
        )

    def log_error(self, error_details: ErrorDetails) -> None:
        log_data = {
            "category": error_details.category.value,
            "severity": error_details.severity.value,
            "source": error_details.source,
        }
        if error_details.error_code:
            log_data["error_code"] = error_details.error_code
        if error_details.http_status_code:
            log_data["http_status_code"] = error_details.http_status_code
        if error_details.context:
            log_data["context"] = error_details.context

        if error_details.severity == ErrorSeverity.HIGH:
            self.logger.error(f"ERROR: {error_details.message}", extra={"data": log_data})
        elif error_details.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(f"WARNING: {error_details.message}", extra={"data": log_data})
        else:
            self.logger.info(f"INFO: {error_details.message}", extra={"data": log_data})
