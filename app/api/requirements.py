"""Requirements API: PDF upload, text extraction and SDLC classification."""

import logging
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from openai import OpenAI

from app.api.deps import get_app_settings, get_current_user_id, get_llm_client, get_store
from app.chains.classify_requirements import classify_requirements
from app.core.config import Settings
from app.core.errors import AppError, FormatError, ValidationError
from app.core.logging import get_logger, log_with_context
from app.core.pdf_text import extract_pdf_text, has_pdf_signature, validate_upload_size
from app.core.schemas_api import UploadRequirementsResponse
from app.db.memory_store import MemoryStore, RecordKind

logger = get_logger(__name__)

router = APIRouter()


@router.post("/requirements/upload", response_model=UploadRequirementsResponse)
async def upload_requirements(
    pdf: UploadFile | None = File(None),
    store: MemoryStore = Depends(get_store),
    client: OpenAI = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
) -> UploadRequirementsResponse:
    """
    Upload a requirements PDF, classify its sentences and store the results.

    The document is stored before classification; if classification fails
    the document remains without requirements.

    Raises:
        ValidationError: If no file was sent
        FormatError: If the file does not start with the PDF signature
        SizeLimitError: If the file exceeds MAX_UPLOAD_BYTES
        HTTPException: 500 on unexpected failures
    """
    if pdf is None:
        raise ValidationError("No PDF file uploaded")

    run_id = uuid.uuid4()
    data = await pdf.read()

    # Cheap checks before any parsing
    if not has_pdf_signature(data):
        raise FormatError("Invalid PDF file")
    validate_upload_size(data, settings.MAX_UPLOAD_BYTES)

    filename = pdf.filename or "uploaded.pdf"
    log_with_context(
        logger,
        logging.INFO,
        f"Processing requirements upload {filename}",
        run_id=str(run_id),
        bytes=len(data),
    )

    try:
        extracted = await run_in_threadpool(
            extract_pdf_text, data, max_bytes=settings.MAX_UPLOAD_BYTES
        )

        document = store.create(
            RecordKind.DOCUMENT,
            {
                "user_id": user_id,
                "filename": filename,
                "content": extracted.text,
                "page_count": extracted.page_count,
            },
        )

        classification = await run_in_threadpool(
            classify_requirements, extracted.text, settings=settings, client=client
        )

        requirements = [
            store.create(
                RecordKind.REQUIREMENT,
                {
                    "document_id": document.id,
                    "user_id": user_id,
                    "text": item.text,
                    "phase": item.phase,
                    "confidence": item.confidence,
                    "user_story": item.user_story or None,
                },
            )
            for item in classification.requirements
        ]

        log_with_context(
            logger,
            logging.INFO,
            f"Stored {len(requirements)} requirements for document {document.id}",
            run_id=str(run_id),
            document_id=document.id,
            **classification.statistics,
        )

        return UploadRequirementsResponse(
            document=document,
            requirements=requirements,
            statistics=classification.statistics,
            extracted_text=extracted.text[: settings.TEXT_PREVIEW_CHARS] + "...",
        )

    except AppError:
        raise
    except Exception as e:
        logger.exception("Requirements upload failed", extra={"run_id": str(run_id)})
        raise HTTPException(status_code=500, detail="Failed to process PDF") from e
