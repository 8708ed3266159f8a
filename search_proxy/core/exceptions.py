from fastapi import status
from typing import Any, Dict, List, Optional


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class ConfigurationError(APIException):
    """Exception raised when required configuration is missing or unreadable."""

    def __init__(
        self,
        detail: str = "Service configuration error",
        code: str = "configuration_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=context
        )


class SigningError(APIException):
    """Exception raised when the upstream request signature cannot be produced."""

    def __init__(
        self,
        detail: str = "Failed to generate signature",
        code: str = "signing_error",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=context
        )
        self.original_exception = original_exception


class ValidationException(APIException):
    """Exception raised when an inbound search query fails validation."""

    def __init__(
        self,
        issues: List[Dict[str, str]],
        detail: str = "Validation failed",
        code: str = "validation_error",
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context: Dict[str, Any] = {"issues": issues}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=merged_context
        )
        self.issues = issues


class UpstreamCallError(APIException):
    """Exception raised when the call to the upstream catalog API fails."""

    def __init__(
        self,
        detail: str = "Upstream catalog request failed",
        code: str = "upstream_call_error",
        upstream_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        merged_context: Dict[str, Any] = {}
        if upstream_status is not None:
            merged_context["upstream_status"] = upstream_status
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=merged_context
        )
        self.upstream_status = upstream_status
        self.original_exception = original_exception
