"""Code API: generation, bug fixing and summarization."""

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
from app.chains.fix_bugs import fix_bugs
from app.chains.generate_code import generate_code
from app.chains.summarize_code import summarize_code
from app.core.config import Settings
from app.core.errors import AppError, ValidationError
from app.core.logging import get_logger
from app.core.schemas_api import (
    FixCodeRequest,
    FixCodeResponse,
    GenerateCodeRequest,
    GenerateCodeResponse,
    SummarizeCodeRequest,
    SummarizeCodeResponse,
)
from app.core.schemas_records import DOC_STYLES
from app.db.memory_store import MemoryStore, RecordKind

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_LANGUAGE = "python"
DEFAULT_STYLE = "technical"


@router.post("/code/generate", response_model=GenerateCodeResponse)
def generate_code_endpoint(
    request: GenerateCodeRequest,
    store: MemoryStore = Depends(get_store),
    client: OpenAI = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
) -> GenerateCodeResponse:
    """Generate code from a description and store it as a ``generated`` snippet."""
    description = require_text(request.description, "Description is required")
    language = request.language or DEFAULT_LANGUAGE

    try:
        result = generate_code(
            description, language, request.framework, settings=settings, client=client
        )
        snippet = store.create(
            RecordKind.CODE_SNIPPET,
            {
                "user_id": user_id,
                "title": f"Generated {language} Code",
                "description": description,
                "language": language,
                "code": description,
                "generated_code": result.code,
                "type": "generated",
            },
        )
    except AppError:
        raise
    except Exception as e:
        logger.exception("Code generation failed")
        raise HTTPException(status_code=500, detail="Failed to generate code") from e

    return GenerateCodeResponse(code_snippet=snippet, suggestions=result.suggestions)


@router.post("/code/fix", response_model=FixCodeResponse)
def fix_code_endpoint(
    request: FixCodeRequest,
    store: MemoryStore = Depends(get_store),
    client: OpenAI = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
) -> FixCodeResponse:
    """
    Fix bugs in code.

    Creates a ``fixed`` snippet, or, when ``codeSnippetId`` is given, attaches
    the fixed code to that existing snippet.
    """
    code = require_text(request.code, "Code is required")
    language = request.language or DEFAULT_LANGUAGE
    snippet_id = require_code_snippet(store, request.code_snippet_id, user_id)

    try:
        result = fix_bugs(code, language, settings=settings, client=client)

        if snippet_id is not None:
            snippet = store.update(
                RecordKind.CODE_SNIPPET,
                snippet_id,
                {"generated_code": result.fixed_code, "type": "fixed"},
            )
        else:
            snippet = store.create(
                RecordKind.CODE_SNIPPET,
                {
                    "user_id": user_id,
                    "title": f"Fixed {language} Code",
                    "description": "Bug-fixed and optimized code",
                    "language": language,
                    "code": code,
                    "generated_code": result.fixed_code,
                    "type": "fixed",
                },
            )
    except AppError:
        raise
    except Exception as e:
        logger.exception("Bug fixing failed")
        raise HTTPException(status_code=500, detail="Failed to fix bugs") from e

    return FixCodeResponse(
        code_snippet=snippet,
        issues=result.issues,
        optimizations=result.optimizations,
    )


@router.post("/code/summarize", response_model=SummarizeCodeResponse)
def summarize_code_endpoint(
    request: SummarizeCodeRequest,
    store: MemoryStore = Depends(get_store),
    client: OpenAI = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
) -> SummarizeCodeResponse:
    """Document code in the requested style and store the documentation."""
    code = require_text(request.code, "Code is required")
    style = request.style or DEFAULT_STYLE
    if style not in DOC_STYLES:
        raise ValidationError(f"Style must be one of: {', '.join(DOC_STYLES)}")
    snippet_id = require_code_snippet(store, request.code_snippet_id, user_id)

    try:
        result = summarize_code(code, style, settings=settings, client=client)
        documentation = store.create(
            RecordKind.DOCUMENTATION,
            {
                "user_id": user_id,
                "code_snippet_id": snippet_id,
                "style": style,
                "overview": result.overview,
                "features": result.features,
                "methods": result.methods,
                "example": result.example,
            },
        )
    except AppError:
        raise
    except Exception as e:
        logger.exception("Code summarization failed")
        raise HTTPException(status_code=500, detail="Failed to summarize code") from e

    return SummarizeCodeResponse(documentation=documentation)
