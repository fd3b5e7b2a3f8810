"""
Edu RAG core package.

Multi-language vector/hybrid document search and real-time document
processing status tracking for the education platform backend.
"""

__version__ = "0.1.0"
