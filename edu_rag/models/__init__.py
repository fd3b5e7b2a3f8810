"""Pydantic value objects shared across search, processing and notifications."""
