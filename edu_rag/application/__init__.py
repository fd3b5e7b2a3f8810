"""Application services orchestrating the core for the API."""
