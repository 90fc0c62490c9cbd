"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Compliance Standards RAG"
    host: str = "0.0.0.0"
    port: int = 3000

    # ── LLM ──────────────────────────────────────────────
    llm_provider: str = "openai"  # "openai" | "groq"
    openai_api_key: str = ""
    groq_api_key: str = ""
    llm_model: str = "gpt-4o"
    llm_temperature: float = 0.0
    llm_max_tokens: int = 2048

    # ── Embeddings ───────────────────────────────────────
    # Must be the same at ingest time and query time.
    embedding_provider: str = "openai"  # "openai" | "sentence_transformers"
    embedding_model: str = "text-embedding-3-small"

    # ── Vector Store ─────────────────────────────────────
    chroma_host: str = ""  # empty → local PersistentClient
    chroma_port: int = 8000
    chroma_persist_dir: str = "./chroma_db"
    collection_name: str = "standards"
    top_k: int = 5

    # ── Ingestion ────────────────────────────────────────
    standards_dir: str = "./data"
    data_file_suffix: str = ".json"
    not_found_marker: str = "not-found"
    ingest_batch_size: int = 100
    ingest_rollback_on_failure: bool = False

    # ── Provider retries ─────────────────────────────────
    provider_max_retries: int = 0
    provider_base_delay: float = 1.0
    provider_max_delay: float = 30.0

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def embedding_identity(self) -> str:
        """Provider-qualified embedding model name stored with the corpus."""
        return f"{self.embedding_provider}:{self.embedding_model}"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
