"""HTTP API for search, processing status and notifications."""
