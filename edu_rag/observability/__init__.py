"""
Observability module.

Provides structured logging helpers and HTTP request logging middleware.
"""

from edu_rag.observability.logger import configure_logging

__all__ = ["configure_logging"]
