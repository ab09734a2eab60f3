"""Batch processing and cache exceptions."""

from typing import Optional
from .base import OkrCoachError, RetryableError

class ProcessingError(OkrCoachError):
    """Base class for batch processing errors."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        batch_id: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if stage:
            self.add_context('processing_stage', stage)
        if batch_id:
            self.add_context('batch_id', batch_id)


class BatchProcessingError(ProcessingError):
    """Raised when a batch of OKR sets cannot be scored."""

    def __init__(
        self,
        message: str,
        *,
        batch_size: Optional[int] = None,
        failed_count: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, stage="batch_processing", **kwargs)
        if batch_size:
            self.add_context('batch_size', batch_size)
        if failed_count:
            self.add_context('failed_records', failed_count)

        self.add_suggestion("Try reducing the chunk size")
        self.add_suggestion("Check the input file for malformed records")

    def _get_default_error_code(self) -> str:
        return "BATCH_PROCESSING_FAILED"


class CacheError(RetryableError, ProcessingError):
    """Raised when score cache operations fail."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        cache_key: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, stage="caching", **kwargs)
        if operation:
            self.add_context('cache_operation', operation)
        if cache_key:
            self.add_context('cache_key', cache_key)

        self.add_suggestion("Check the cache database path")
        self.add_suggestion("Run with --cache-backend memory or none to bypass the cache")

    def _get_default_error_code(self) -> str:
        return "CACHE_OPERATION_FAILED"
