"""API router for /api endpoints."""

from fastapi import APIRouter

from app.api import chat, code, history, requirements, testgen

router = APIRouter()

# Requirements upload and SDLC classification
router.include_router(requirements.router, tags=["requirements"])

# Code generation, bug fixing and summarization
router.include_router(code.router, tags=["code"])

# Test generation
router.include_router(testgen.router, tags=["tests"])

# SDLC assistant chat
router.include_router(chat.router, tags=["chat"])

# Record listings for the current user
router.include_router(history.router, tags=["history"])
