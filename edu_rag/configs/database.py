"""
Database connection settings.

POSTGRES_URL, when set, is used as-is (tests point it at
sqlite+aiosqlite). Otherwise an asyncpg URL is assembled from the
individual fields with credentials escaped by SQLAlchemy.

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Connection and pool configuration for the chunk and status stores
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

from edu_rag.configs.base import env_config


class DatabaseSettings(BaseSettings):
    """Where the documents and document_chunks tables live."""

    model_config = env_config("POSTGRES_")

    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    db: str = Field(default="edurag", description="Database name")
    sslmode: str = Field(default="require", description="'require' adds ssl=require for asyncpg")
    url: str | None = Field(default=None, description="Full async URL overriding the fields above")

    pool_size: int = Field(default=10, ge=1)
    max_overflow: int = Field(default=20, ge=0)
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False)

    @property
    def async_database_url(self) -> str:
        if self.url:
            return self.url
        query = {"ssl": "require"} if self.sslmode == "require" else {}
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
            query=query,
        ).render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")
