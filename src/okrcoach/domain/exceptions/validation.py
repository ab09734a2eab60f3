"""Input validation exceptions."""

from typing import Optional, Any
from .base import OkrCoachError

class ValidationError(OkrCoachError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.add_context('field_name', field_name)
        if field_value is not None:
            self.add_context('field_value', str(field_value))

    def _get_default_error_code(self) -> str:
        return "VALIDATION_ERROR"


class FileValidationError(ValidationError):
    """Raised when an input file fails validation."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        validation_type: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if file_path:
            self.add_context('file_path', file_path)
        if validation_type:
            self.add_context('validation_type', validation_type)

    def _get_default_error_code(self) -> str:
        return "FILE_VALIDATION_FAILED"


class InputFileNotFoundError(FileValidationError):
    """Raised when a required input file doesn't exist."""
    def __init__(self, file_path: str, **kwargs):
        message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, validation_type="existence_check", **kwargs)
        self.add_suggestion("Check if the file path is correct and accessible")

    def _get_default_error_code(self) -> str:
        return "FILE_NOT_FOUND"


class InvalidFileFormatError(FileValidationError):
    """Raised when an input file cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        expected_format: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, validation_type="format_check", **kwargs)
        if expected_format:
            self.add_context('expected_format', expected_format)
            self.add_suggestion(f"Provide a valid {expected_format} file")

    def _get_default_error_code(self) -> str:
        return "INVALID_FILE_FORMAT"


class ParameterValidationError(ValidationError):
    """Raised when a parameter value is out of range or of the wrong type."""

    def __init__(
        self,
        message: str,
        *,
        parameter: Optional[str] = None,
        expected: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, field_name=parameter, **kwargs)
        if expected:
            self.add_context('expected', expected)

    def _get_default_error_code(self) -> str:
        return "INVALID_PARAMETER"
