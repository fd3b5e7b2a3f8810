"""
Document processing pipeline configuration.

Stage duration estimates drive both progress bands and ETA.
Retry settings bound the failed -> retry cycle.

Dependencies: pydantic, pydantic_settings
System role: Processing state machine configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from edu_rag.configs.base import env_config


class ProcessingSettings(BaseSettings):
    """Settings for the document processing state machine."""

    model_config = env_config("PROCESSING_")

    uploading_seconds: float = Field(default=30.0, description="Estimated upload duration", gt=0)
    extracting_seconds: float = Field(default=90.0, description="Estimated text extraction duration", gt=0)
    chunking_seconds: float = Field(default=60.0, description="Estimated chunking duration", gt=0)
    embedding_seconds: float = Field(default=120.0, description="Estimated embedding duration", gt=0)

    max_retries: int = Field(default=3, description="Retries allowed after a failure", ge=0)
    backoff_base_seconds: float = Field(default=1.0, description="First retry delay", ge=0)
    backoff_multiplier: float = Field(default=2.0, description="Exponential backoff factor", ge=1)
    backoff_max_seconds: float = Field(default=30.0, description="Retry delay ceiling", ge=0)
    tracked_jobs_limit: int = Field(
        default=1000,
        description="Job snapshots kept in memory; older ones are rebuilt from the status store",
        ge=1,
    )

    @property
    def stage_durations(self) -> dict[str, float]:
        """Estimated seconds per active stage keyed by status value."""
        return {
            "uploading": self.uploading_seconds,
            "extracting": self.extracting_seconds,
            "chunking": self.chunking_seconds,
            "embedding": self.embedding_seconds,
        }
