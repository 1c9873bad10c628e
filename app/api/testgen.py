"""Test generation API."""

from fastapi import APIRouter, Depends, HTTPException
from openai import OpenAI

from app.api.deps import (
    get_app_settings,
    get_current_user_id,
    get_llm_client,
    get_store,
    require_code_snippet,
    require_text,
)
from app.chains.generate_tests import generate_tests
from app.core.config import Settings
from app.core.errors import AppError
from app.core.logging import get_logger
from app.core.schemas_api import GenerateTestsRequest, GenerateTestsResponse, TestStatistics
from app.db.memory_store import MemoryStore, RecordKind

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_FRAMEWORK = "unittest"


@router.post("/tests/generate", response_model=GenerateTestsResponse)
def generate_tests_endpoint(
    request: GenerateTestsRequest,
    store: MemoryStore = Depends(get_store),
    client: OpenAI = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
) -> GenerateTestsResponse:
    """Generate a test suite for code or requirements and store it."""
    code = require_text(request.code, "Code or requirements are required")
    framework = request.framework or DEFAULT_FRAMEWORK
    snippet_id = require_code_snippet(store, request.code_snippet_id, user_id)

    try:
        result = generate_tests(
            code,
            framework,
            request.input_type or "code",
            settings=settings,
            client=client,
        )
        test_case = store.create(
            RecordKind.TEST_CASE,
            {
                "user_id": user_id,
                "code_snippet_id": snippet_id,
                "framework": framework,
                "test_code": result.test_code,
                "coverage": result.coverage,
                "total_tests": result.total_tests,
            },
        )
    except AppError:
        raise
    except Exception as e:
        logger.exception("Test generation failed")
        raise HTTPException(status_code=500, detail="Failed to generate tests") from e

    return GenerateTestsResponse(
        test_case=test_case,
        statistics=TestStatistics(
            total=result.total_tests,
            positive=result.positive_tests,
            negative=result.negative_tests,
        ),
    )
