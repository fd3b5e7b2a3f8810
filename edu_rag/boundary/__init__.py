"""Adapters to storage, embedding models, translation and AWS."""
