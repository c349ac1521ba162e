"""
Core building blocks for the landmark client.
Provides the result type, observable state, exceptions and validation.
"""

from .result import Success, Failure, Result
from .state import StateCell
from .exceptions import (
    ErrorCode,
    LandmarkClientError,
    TransportError,
    ConversionError,
    ImagePreparationError,
    LocationUnavailableError,
    OperationInProgressError,
)
