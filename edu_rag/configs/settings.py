"""
Application settings root.

One Settings object holds every section; get_settings() builds it once
per process so environment variables are read a single time.

Dependencies: pydantic, edu_rag.configs sections
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from edu_rag.configs.base import BaseSettings
from edu_rag.configs.database import DatabaseSettings
from edu_rag.configs.embeddings import EmbeddingSettings
from edu_rag.configs.notifications import NotificationSettings
from edu_rag.configs.processing import ProcessingSettings
from edu_rag.configs.search import SearchSettings


class Settings(BaseSettings):
    """Top-level fields plus one attribute per prefixed section."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    embeddings: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings; call get_settings.cache_clear() to re-read the environment."""
    return Settings()
