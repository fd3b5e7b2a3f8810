"""Core search, processing and notification logic."""

from edu_rag.core.exceptions import (
    DimensionMismatchError,
    DocumentNotFoundError,
    EduRagException,
    IllegalTransitionError,
    InvalidEmbeddingError,
    InvalidWeightsError,
    RetryLimitExceededError,
    SearchCancelledError,
    SearchTimeoutError,
    ValidationError,
)

__all__ = [
    "DimensionMismatchError",
    "DocumentNotFoundError",
    "EduRagException",
    "IllegalTransitionError",
    "InvalidEmbeddingError",
    "InvalidWeightsError",
    "RetryLimitExceededError",
    "SearchCancelledError",
    "SearchTimeoutError",
    "ValidationError",
]
