"""AWS service adapters."""

from edu_rag.boundary.aws.ses_channel import SesEmailChannel

__all__ = ["SesEmailChannel"]
