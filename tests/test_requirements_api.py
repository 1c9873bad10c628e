"""Tests for the requirements upload endpoint."""

from unittest.mock import patch

import httpx
import openai

from app.api.deps import get_app_settings
from app.core.config import Settings
from app.db.memory_store import DEFAULT_USER_ID, RecordKind
from tests.fakes.fake_openai import make_pdf

CLASSIFIED = {
    "requirements": [
        {
            "text": "Users must log in with a password.",
            "phase": "Requirements",
            "confidence": 92,
            "userStory": "As a user, I want to log in so that my data is private",
        },
        {
            "text": "Run the suite on every commit.",
            "phase": "Testing",
            "confidence": 81,
            "userStory": "As a developer, I want CI so that regressions are caught",
        },
    ]
}


def upload(client, data: bytes, filename: str = "requirements.pdf"):
    return client.post(
        "/api/requirements/upload",
        files={"pdf": (filename, data, "application/pdf")},
    )


def test_upload_classifies_and_stores(api_client, fake_llm, store):
    fake_llm.queue_json(CLASSIFIED)
    data = make_pdf(["Users must log in with a password.", "Run the suite on every commit."])

    response = upload(api_client, data)

    assert response.status_code == 200
    body = response.json()
    assert body["document"]["filename"] == "requirements.pdf"
    assert body["document"]["pageCount"] == 2
    assert body["document"]["userId"] == DEFAULT_USER_ID
    assert [r["phase"] for r in body["requirements"]] == ["Requirements", "Testing"]
    assert all(r["documentId"] == body["document"]["id"] for r in body["requirements"])
    assert body["statistics"] == {
        "Requirements": 1,
        "Design": 0,
        "Development": 0,
        "Testing": 1,
        "Deployment": 0,
    }
    assert body["extractedText"].startswith("Users must log in")
    assert body["extractedText"].endswith("...")

    assert len(store.list_requirements_for_document(body["document"]["id"])) == 2
    assert "Users must log in with a password." in fake_llm.last_user_prompt


def test_preview_is_truncated(api_client, fake_llm):
    fake_llm.queue_json({"requirements": []})
    pages = [f"The system shall keep audit log number {i}." for i in range(20)]

    response = upload(api_client, make_pdf(pages))

    assert response.status_code == 200
    assert len(response.json()["extractedText"]) == 500 + len("...")


def test_missing_file_is_rejected(api_client, fake_llm):
    response = api_client.post("/api/requirements/upload")

    assert response.status_code == 400
    assert response.json() == {"error": "No PDF file uploaded"}
    assert fake_llm.calls == []


def test_non_pdf_is_rejected_without_side_effects(api_client, fake_llm, store):
    response = upload(api_client, b"hello, this is plain text", filename="notes.txt")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid PDF file"}
    assert store.list_where(RecordKind.DOCUMENT) == []
    assert fake_llm.calls == []


def test_oversized_file_is_rejected_before_extraction(api_client, store):
    api_client.app.dependency_overrides[get_app_settings] = lambda: Settings(
        OPENAI_API_KEY="test-key", MAX_UPLOAD_BYTES=64
    )

    with patch("app.api.requirements.extract_pdf_text") as mock_extract:
        response = upload(api_client, make_pdf(["Too big for the limit"]))

    assert response.status_code == 400
    assert "File size exceeds" in response.json()["error"]
    mock_extract.assert_not_called()
    assert store.list_where(RecordKind.DOCUMENT) == []


def test_corrupt_pdf_returns_500(api_client, fake_llm, store):
    response = upload(api_client, b"%PDF-1.7\nnot actually a pdf body")

    assert response.status_code == 500
    assert response.json()["error"].startswith("PDF processing failed")
    assert store.list_where(RecordKind.DOCUMENT) == []
    assert fake_llm.calls == []


def test_ai_failure_keeps_document(api_client, fake_llm, store):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    fake_llm.fail_with(openai.APIConnectionError(request=request))

    response = upload(api_client, make_pdf(["Users must log in."]))

    assert response.status_code == 502
    assert response.json()["error"].startswith("Requirements classification failed")
    documents = store.list_where(RecordKind.DOCUMENT)
    assert len(documents) == 1
    assert store.list_requirements_for_document(documents[0].id) == []


def test_unexpected_failure_returns_generic_500(api_client, fake_llm):
    fake_llm.queue_json(CLASSIFIED)

    with patch(
        "app.api.requirements.classify_requirements", side_effect=RuntimeError("boom")
    ):
        response = upload(api_client, make_pdf(["Users must log in."]))

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process PDF"}
