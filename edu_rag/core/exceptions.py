"""
Exception hierarchy for the search and processing core.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and for building
structured error responses.

Dependencies: edu_rag.models.common
System role: Centralized exception handling across the application
"""

from typing import Any

from edu_rag.models.common import ErrorResponse


class EduRagException(Exception):
    """Base exception for all application errors."""

    code = "INTERNAL_ERROR"
    retryable = False
    suggested_action: str | None = "Please try again or contact support if the problem persists"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_response(self) -> ErrorResponse:
        """Build the structured error payload for API callers."""
        return ErrorResponse(
            error=self.message,
            code=self.code,
            details=self.details or None,
            retryable=self.retryable,
            suggested_action=self.suggested_action,
        )


class ValidationError(EduRagException):
    """Raised when caller-supplied data violates a precondition."""

    code = "INVALID_PARAMETERS"
    suggested_action = "Please check your search parameters and try again"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidEmbeddingError(ValidationError):
    """Raised when an embedding has the wrong dimension or non-finite values."""

    code = "INVALID_EMBEDDING"
    suggested_action = "Regenerate the embedding with the configured model"


class DimensionMismatchError(ValidationError):
    """Raised when two vectors of different lengths are compared."""

    code = "DIMENSION_MISMATCH"
    suggested_action = None

    def __init__(self, expected: int, actual: int) -> None:
        """
        Initialize dimension mismatch error.

        Args:
            expected: Length of the first vector
            actual: Length of the second vector
        """
        super().__init__(
            f"Vector dimensions differ: {expected} != {actual}",
            details={"expected": expected, "actual": actual},
        )


class InvalidWeightsError(ValidationError):
    """Raised when hybrid weights are out of range or do not sum to 1.0."""

    code = "INVALID_WEIGHTS"
    suggested_action = "Vector weight and keyword weight must sum to 1"

    def __init__(self, vector_weight: float, keyword_weight: float) -> None:
        """
        Initialize invalid weights error.

        Args:
            vector_weight: Supplied vector weight
            keyword_weight: Supplied keyword weight
        """
        super().__init__(
            "Vector weight and keyword weight must each be in [0, 1] and sum to 1.0",
            field="vector_weight",
            details={
                "vector_weight": vector_weight,
                "keyword_weight": keyword_weight,
                "expected_sum": 1.0,
                "actual_sum": vector_weight + keyword_weight,
            },
        )


class SearchError(EduRagException):
    """Base exception for search failures."""

    code = "SEARCH_SERVICE_UNAVAILABLE"
    retryable = True
    suggested_action = "Please check your connection and try again"


class SearchTimeoutError(SearchError):
    """Raised when fetching candidates exceeds the configured deadline."""

    code = "SEARCH_TIMEOUT"


class SearchCancelledError(SearchError):
    """Raised when a caller cancels a search before it completes."""

    code = "SEARCH_CANCELLED"
    suggested_action = None


class TransitionError(EduRagException):
    """Base exception for processing state machine violations."""

    code = "TRANSITION_ERROR"
    suggested_action = None

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize transition error.

        Args:
            message: Error message
            document_id: Document whose job rejected the transition
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class IllegalTransitionError(TransitionError):
    """Raised when a status change skips, reverses or leaves a terminal stage."""

    code = "ILLEGAL_TRANSITION"

    def __init__(self, document_id: str, current: str, requested: str, reason: str | None = None) -> None:
        """
        Initialize illegal transition error.

        Args:
            document_id: Document ID
            current: Current status value
            requested: Requested status value
            reason: Extra explanation, e.g. for an outdated job snapshot
        """
        details = {"current_status": current, "requested_status": requested}
        message = f"Cannot move document processing from '{current}' to '{requested}'"
        if reason:
            details["reason"] = reason
            message = f"{message}: {reason}"
        super().__init__(message, document_id=document_id, details=details)


class RetryLimitExceededError(TransitionError):
    """Raised when a failed job has used all of its retries."""

    code = "RETRY_LIMIT_EXCEEDED"
    suggested_action = "Please re-upload the document or contact support"

    def __init__(self, document_id: str, retry_count: int, max_retries: int) -> None:
        """
        Initialize retry limit error.

        Args:
            document_id: Document ID
            retry_count: Retries already attempted
            max_retries: Configured retry limit
        """
        super().__init__(
            f"Document {document_id} exhausted {max_retries} processing retries",
            document_id=document_id,
            details={"retry_count": retry_count, "max_retries": max_retries},
        )


class DocumentNotFoundError(EduRagException):
    """Raised when the status store has no record for a document."""

    code = "DOCUMENT_NOT_FOUND"
    suggested_action = "Please upload documents or check your permissions"

    def __init__(self, document_id: str) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
        """
        super().__init__(f"Document not found: {document_id}", {"document_id": document_id})


class ChunkNotFoundError(EduRagException):
    """Raised when a chunk used as a similarity source does not exist."""

    code = "CHUNK_NOT_FOUND"
    suggested_action = "Refresh the results and pick another passage"

    def __init__(self, chunk_id: str) -> None:
        super().__init__(f"Chunk not found: {chunk_id}", {"chunk_id": chunk_id})


class DeliveryError(EduRagException):
    """Raised by a delivery channel when a notification could not be sent."""

    code = "DELIVERY_FAILED"
    retryable = True
    suggested_action = None

    def __init__(self, channel: str, message: str) -> None:
        """
        Initialize delivery error.

        Args:
            channel: Channel name
            message: Error message
        """
        super().__init__(message, {"channel": channel})
