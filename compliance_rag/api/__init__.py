"""
FastAPI application factory and API package.

Run with:
    uvicorn compliance_rag.api:app --port 3000

Or via the CLI:
    compliance-rag serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from compliance_rag.config import get_settings
from compliance_rag.api.routes import ask_router, health_router
from compliance_rag.services.answer_service import AnswerService

logger = logging.getLogger(__name__)


def create_app(answer_service: AnswerService | None = None) -> FastAPI:
    """
    Application factory — create and configure the FastAPI instance.

    The AnswerService is built from settings on the first request unless
    one is passed in.
    """
    settings = get_settings()

    application = FastAPI(
        title="Compliance Standards RAG API",
        description="Answers compliance questions from a corpus of regulatory standards",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    holder: dict[str, AnswerService] = {}
    if answer_service is not None:
        holder["service"] = answer_service

    def get_answer_service() -> AnswerService:
        if "service" not in holder:
            from compliance_rag.factory import build_answer_service

            holder["service"] = build_answer_service(settings)
        return holder["service"]

    application.state.get_answer_service = get_answer_service

    application.include_router(health_router, tags=["Health"])
    application.include_router(ask_router, tags=["Ask"])

    logger.info(f"Configured {settings.app_name} API")
    return application


# Module-level instance for `uvicorn compliance_rag.api:app`
app = create_app()
