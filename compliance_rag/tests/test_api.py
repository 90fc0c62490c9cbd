"""
Tests: HTTP boundary (POST /ask, GET /health).

Run with:
    pytest compliance_rag/tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from compliance_rag.api import create_app
from compliance_rag.errors import AnswerGenerationError


@pytest.fixture
def client_for(answer_service_factory):
    def _build(service=None):
        return TestClient(create_app(service or answer_service_factory()))
    return _build


class TestAsk:
    def test_missing_question_400(self, client_for):
        resp = client_for().post("/ask", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "question is required"}

    def test_blank_question_400(self, client_for):
        resp = client_for().post("/ask", json={"question": "   "})
        assert resp.status_code == 400

    def test_no_body_400(self, client_for):
        resp = client_for().post("/ask")
        assert resp.status_code == 400
        assert resp.json() == {"error": "question is required"}

    def test_invalid_json_body_400(self, client_for):
        resp = client_for().post("/ask", content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("payload", [["question"], "question", 42, {"question": 7}, {"question": None}])
    def test_non_object_body_or_non_string_question_400(self, client_for, payload):
        resp = client_for().post("/ask", json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "question is required"}

    def test_success_returns_answer_and_sources(self, client_for, ingestion_service, write_json, iso_record):
        write_json("iso.json", [iso_record])
        ingestion_service.ingest()

        resp = client_for().post("/ask", json={"question": "implantable cardiac device"})
        assert resp.status_code == 200
        body = resp.json()
        assert "ISO 14708-1:2014" in body["answer"]
        assert body["sources"][0]["id"] == "ISO-14708-1-2014"
        assert body["sources"][0]["standardNumber"] == "ISO 14708-1:2014"
        assert set(body["sources"][0]) == {"id", "standardNumber", "title", "relevance"}

    def test_empty_corpus_is_500_not_empty_sources(self, client_for):
        resp = client_for().post("/ask", json={"question": "anything"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}

    def test_generation_error_detail_not_leaked(self, client_for, ingestion_service, write_json,
                                                iso_record, answer_service_factory, llm_factory):
        write_json("iso.json", [iso_record])
        ingestion_service.ingest()
        service = answer_service_factory(llm_factory(error=RuntimeError("secret upstream detail")))

        resp = client_for(service).post("/ask", json={"question": "implantable"})
        assert resp.status_code == 500
        assert "secret" not in resp.text

    def test_pipeline_exception_logged(self, client_for, caplog):
        class Exploding:
            async def answer(self, question):
                raise AnswerGenerationError("model down")

        resp = client_for(Exploding()).post("/ask", json={"question": "q"})
        assert resp.status_code == 500
        assert "Failed to answer question" in caplog.text


def test_health(client_for):
    resp = client_for().get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
