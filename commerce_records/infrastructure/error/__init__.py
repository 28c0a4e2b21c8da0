"""
Error handling package for the record adapters.
"""

from commerce_records.infrastructure.error.handler import (
    ErrorCategory,
    ErrorDetails,
    ErrorHandler,
    ErrorSeverity,
)

__all__ = [
    "ErrorHandler",
    "ErrorDetails",
    "ErrorCategory",
    "ErrorSeverity",
]
