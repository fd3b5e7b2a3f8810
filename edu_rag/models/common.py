"""
Common response models.

Generic error schema carrying enough structure for the UI to render
a meaningful message without parsing exception strings.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Human-readable error message")
    code: str = Field(description="Machine-readable error kind")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")
    retryable: bool = Field(default=False, description="Whether retrying may succeed")
    suggested_action: str | None = Field(default=None, description="What the user can do next")
