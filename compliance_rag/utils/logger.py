"""Centralized logging configuration.
Call setup_logging() once at process start (CLI command or API server).
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Provider SDKs and the vector store log every HTTP round trip at INFO.
_QUIET_LOGGERS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "urllib3": logging.WARNING,
    "openai": logging.WARNING,
    "chromadb": logging.WARNING,
    "sentence_transformers": logging.WARNING,
    "langchain_core": logging.INFO,
    "langchain_openai": logging.INFO,
    "langchain_groq": logging.INFO,
    "uvicorn": logging.INFO,
}


def setup_logging(level: str = "INFO") -> None:
    """Attach one stdout handler to the root logger; later calls are no-ops."""
    root = logging.getLogger()
    if root.handlers:
        return

    numeric = getattr(logging, level.upper())
    root.setLevel(numeric)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
