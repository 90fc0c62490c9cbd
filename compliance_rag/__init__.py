"""Compliance Standards RAG — retrieval-augmented answers over regulatory standards."""

__version__ = "0.1.0"
