"""
Application services.

Dependencies: edu_rag.core
System role: Use-case orchestration between API and core
"""

from edu_rag.application.services.processing_service import ProcessingService
from edu_rag.application.services.search_service import SearchService

__all__ = ["ProcessingService", "SearchService"]
