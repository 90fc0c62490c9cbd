"""
LLM Service — builds the LangChain chat model used to write answers.

  - build_llm(settings) → configured ChatOpenAI / ChatGroq
"""

from __future__ import annotations

import logging

from compliance_rag.config import Settings

logger = logging.getLogger(__name__)


def build_llm(settings: Settings):
    """Return a chat model for the configured provider."""
    provider = settings.llm_provider.lower()

    if provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is not set in environment / .env file")
        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )
    elif provider == "groq":
        if not settings.groq_api_key:
            raise ValueError("GROQ_API_KEY is not set in environment / .env file")
        from langchain_groq import ChatGroq

        llm = ChatGroq(
            api_key=settings.groq_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )
    else:
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

    logger.info(f"Initialized {provider} LLM: {settings.llm_model}")
    return llm
