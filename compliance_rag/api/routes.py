"""
API routes — thin HTTP layer over the AnswerService.

Routes:
  GET  /health → API health check
  POST /ask    → Answer a compliance question from the standards corpus
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from compliance_rag.models.schemas import QueryResult

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
ask_router = APIRouter()


# ── Request parsing ──────────────────────────────────────

async def read_question(request: Request) -> str:
    """
    Pull ``question`` out of the raw JSON body.  A missing or unparsable
    body, a non-object body or a non-string question all yield "".
    """
    try:
        payload: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ""
    if not isinstance(payload, dict):
        return ""
    question = payload.get("question")
    if not isinstance(question, str):
        return ""
    return question.strip()


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Ask ──────────────────────────────────────────────────

@ask_router.post("/ask", response_model=QueryResult)
async def ask(request: Request):
    """
    Answer a question.  400 on a missing or blank question; any pipeline
    failure is logged here and returned as a generic 500.
    """
    question = await read_question(request)
    if not question:
        return JSONResponse(status_code=400, content={"error": "question is required"})

    try:
        service = request.app.state.get_answer_service()
        result = await service.answer(question)
    except Exception:
        logger.exception("Failed to answer question")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return result
