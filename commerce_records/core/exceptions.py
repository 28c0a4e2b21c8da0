from typing import Any, Dict, Optional, Union


class CommerceRecordsError(Exception):
    """
    Base exception for record adapter errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent reporting."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "context": self.context
            }
        }


class RecordNotFound(CommerceRecordsError):
    """Raised when a record cannot be resolved by id."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Union[str, int]] = None,
        detail: Optional[str] = None,
        code: str = "record_not_found",
        context: Optional[Dict[str, Any]] = None
    ):
        if detail is None:
            if resource_id is None or resource_id == "":
                detail = f"Couldn't find {resource_type} without an ID"
            else:
                detail = f"Couldn't find {resource_type} with id={resource_id}"

        merged_context = {
            "resource_type": resource_type,
            "resource_id": None if resource_id is None else str(resource_id)
        }
        if context:
            merged_context.update(context)

        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(detail=detail, code=code, context=merged_context)


class RecordNotInIdentityMap(RecordNotFound):
    """Raised when a direct identity map lookup misses."""

    def __init__(self, resource_type: str, resource_id: Union[str, int]):
        super().__init__(
            resource_type,
            resource_id,
            code="record_not_in_identity_map"
        )


class TransportError(CommerceRecordsError):
    """
    Raised for any non-2xx response the adapter does not translate itself,
    and for network failures (status_code is None in that case).
    """

    def __init__(
        self,
        detail: str = "Remote API request failed",
        status_code: Optional[int] = None,
        body: Any = None,
        response: Any = None,
        code: str = "transport_error",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        merged_context: Dict[str, Any] = {}
        if status_code is not None:
            merged_context["status_code"] = status_code
        if context:
            merged_context.update(context)

        super().__init__(detail=detail, code=code, context=merged_context)
        self.status_code = status_code
        self.body = body
        self.response = response
        self.original_exception = original_exception

        if original_exception is not None:
            self.context["original_error"] = str(original_exception)


class RateLimitError(TransportError):
    """Raised when the API limit is exceeded and no (further) retry is allowed."""

    def __init__(
        self,
        detail: str = "Rate limit exceeded",
        retry_after: Optional[float] = None,
        body: Any = None,
        response: Any = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context: Dict[str, Any] = {}
        if retry_after is not None:
            merged_context["retry_after"] = retry_after
        if context:
            merged_context.update(context)

        super().__init__(
            detail=detail,
            status_code=429,
            body=body,
            response=response,
            code="rate_limit_error",
            context=merged_context
        )
        self.retry_after = retry_after


class AdapterNotFoundError(CommerceRecordsError):
    """Raised when no adapter is registered for a resource name."""

    def __init__(self, resource_name: str):
        super().__init__(
            detail=f"No adapter registered for resource '{resource_name}'",
            code="adapter_not_found",
            context={"resource_name": resource_name}
        )


class ConfigError(CommerceRecordsError):
    """Raised for invalid client or registry wiring."""

    def __init__(self, detail: str = "Invalid configuration", context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, code="config_error", context=context)
