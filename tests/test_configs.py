"""Tests for environment-driven settings."""

from edu_rag.configs.base import env_config
from edu_rag.configs.search import SearchSettings
from edu_rag.configs.settings import Settings
from edu_rag.models.search import SearchOptions


def test_env_config_sets_prefix_and_env_file() -> None:
    config = env_config("SEARCH_")

    assert config["env_prefix"] == "SEARCH_"
    assert config["env_file"] == ".env"
    assert config["extra"] == "ignore"


def test_section_reads_prefixed_variables(monkeypatch) -> None:
    monkeypatch.setenv("SEARCH_DEFAULT_MAX_RESULTS", "7")
    monkeypatch.setenv("SEARCH_DEFAULT_MIN_SIMILARITY", "0.25")

    options = SearchOptions().with_defaults(SearchSettings())

    assert options.max_results == 7
    assert options.min_similarity == 0.25


def test_top_level_fields(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CORS_ORIGINS", '["https://school.example"]')

    settings = Settings()

    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://school.example"]


def test_database_url_escapes_credentials() -> None:
    from edu_rag.configs.database import DatabaseSettings

    config = DatabaseSettings(user="edu", password="p@ss/word", host="db", port=6543, db="search", sslmode="disable")

    assert config.async_database_url == "postgresql+asyncpg://edu:p%40ss%2Fword@db:6543/search"
    assert not config.is_sqlite


def test_database_url_override_wins() -> None:
    from edu_rag.configs.database import DatabaseSettings

    config = DatabaseSettings(url="sqlite+aiosqlite:///:memory:")

    assert config.async_database_url == "sqlite+aiosqlite:///:memory:"
    assert config.is_sqlite
