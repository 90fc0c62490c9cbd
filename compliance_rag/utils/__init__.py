from .logger import setup_logging
from .hashing import sha256_hash, corpus_fingerprint
from .retry import call_with_retry, acall_with_retry, is_retryable

__all__ = [
    "setup_logging",
    "sha256_hash",
    "corpus_fingerprint",
    "call_with_retry",
    "acall_with_retry",
    "is_retryable",
]
