"""
Custom exceptions for the landmark client.

Exceptions are raised by the transport and preparation layers and stop at the
repository boundary, where they become ``Failure`` results.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Transport errors
    HTTP_ERROR = "HTTP_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Data errors
    CONVERSION_FAILED = "CONVERSION_FAILED"

    # Local resource errors
    IMAGE_PREPARATION_FAILED = "IMAGE_PREPARATION_FAILED"
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"

    # State errors
    OPERATION_IN_PROGRESS = "OPERATION_IN_PROGRESS"


class LandmarkClientError(Exception):
    """Base exception for the landmark client."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class TransportError(LandmarkClientError):
    """Raised on a non-2xx response or a network-level failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        error_code: Optional[ErrorCode] = None
    ):
        if error_code is None:
            error_code = ErrorCode.HTTP_ERROR if status_code is not None else ErrorCode.NETWORK_ERROR
        details = {"reason": reason} if reason else {}
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=status_code
        )
        self.reason = reason

    @classmethod
    def from_status(cls, status_code: int, reason: Optional[str] = None) -> "TransportError":
        reason = reason or "Unknown status"
        return cls(f"HTTP {status_code}: {reason}", status_code=status_code, reason=reason)


class ConversionError(LandmarkClientError):
    """Raised when one raw record cannot be mapped to a Landmark."""

    def __init__(self, message: str, record: Any = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.CONVERSION_FAILED,
            details={"record": record}
        )


class ImagePreparationError(LandmarkClientError):
    """Raised when a local image cannot be staged for upload."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.IMAGE_PREPARATION_FAILED,
            details={"path": path} if path else {}
        )


class LocationUnavailableError(LandmarkClientError):
    """Raised when no device location can be obtained (permission, provider, timeout)."""

    def __init__(self, reason: str):
        super().__init__(
            message=reason,
            error_code=ErrorCode.LOCATION_UNAVAILABLE,
            details={"reason": reason}
        )
        self.reason = reason


class OperationInProgressError(LandmarkClientError):
    """Raised when a mutation is started while another one is still loading."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Cannot start '{operation}' while another operation is in progress",
            error_code=ErrorCode.OPERATION_IN_PROGRESS,
            details={"operation": operation}
        )
