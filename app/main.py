"""FastAPI application entry point."""

import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api import router as api_router
from app.core.errors import AppError
from app.core.logging import get_logger
from app.db.memory_store import MemoryStore

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Translate domain errors into ``{"error": message}`` responses."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        content={"error": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies get the same error shape as missing fields."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    message = "Invalid request: " + "; ".join(problems) if problems else "Invalid request"
    return JSONResponse(content={"error": message}, status_code=400)


def create_app(store: MemoryStore | None = None) -> FastAPI:
    """
    Build the application around an explicitly constructed store.

    Args:
        store: Record store (a fresh MemoryStore when omitted)

    Returns:
        Configured FastAPI app
    """
    application = FastAPI(
        title="SmartSDLC API",
        description="AI-assisted requirements, code, test and documentation service",
        version="0.1.0",
    )
    application.state.store = store if store is not None else MemoryStore()

    frontend_url = os.getenv("FRONTEND_URL")
    if frontend_url:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=[frontend_url],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(HTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    @application.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "ok"}, status_code=200)

    application.include_router(api_router, prefix="/api")
    return application


app = create_app()
