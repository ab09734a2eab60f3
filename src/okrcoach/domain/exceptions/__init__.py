"""Custom exceptions for the okrcoach package."""

# Base exceptions
from .base import (
    OkrCoachError,
    RetryableError,
    ConfigurationError,
    ResourceError,
    DatabaseError,
)

# Processing exceptions
from .processing import (
    ProcessingError,
    BatchProcessingError,
    CacheError,
)

# Validation exceptions
from .validation import (
    ValidationError,
    FileValidationError,
    InputFileNotFoundError,
    InvalidFileFormatError,
    ParameterValidationError,
)

# Session exceptions
from .session import (
    SessionError,
    SessionBusyError,
    InvalidPhaseError,
)

__all__ = [
    # Base
    "OkrCoachError",
    "RetryableError",
    "ConfigurationError",
    "ResourceError",
    "DatabaseError",

    # Processing
    "ProcessingError",
    "BatchProcessingError",
    "CacheError",

    # Validation
    "ValidationError",
    "FileValidationError",
    "InputFileNotFoundError",
    "InvalidFileFormatError",
    "ParameterValidationError",

    # Session
    "SessionError",
    "SessionBusyError",
    "InvalidPhaseError",
]
