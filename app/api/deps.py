"""FastAPI dependencies shared by the API routers."""

from fastapi import Depends, Request
from openai import OpenAI
from pydantic import ValidationError as SchemaValidationError

from app.core.config import Settings, get_settings
from app.core.errors import ConfigurationError, RecordNotFoundError, ValidationError
from app.core.llm import get_openai_client
from app.core.logging import get_logger
from app.db.memory_store import DEFAULT_USER_ID, MemoryStore, RecordKind

logger = get_logger(__name__)


def get_store(request: Request) -> MemoryStore:
    """Return the store attached to the running application."""
    return request.app.state.store


def get_app_settings() -> Settings:
    """
    Resolve settings for a request.

    Raises:
        ConfigurationError: If required settings (e.g. OPENAI_API_KEY) are missing
    """
    try:
        return get_settings()
    except SchemaValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise ConfigurationError("Server configuration is incomplete") from e


def get_llm_client(settings: Settings = Depends(get_app_settings)) -> OpenAI:
    return get_openai_client(settings)


def get_current_user_id() -> str:
    """Fixed identity: there is no authentication layer."""
    return DEFAULT_USER_ID


def require_text(value: str | None, message: str) -> str:
    """
    Reject missing or blank required input.

    Raises:
        ValidationError: If ``value`` is None or whitespace only
    """
    if value is None or not value.strip():
        raise ValidationError(message)
    return value


def require_code_snippet(
    store: MemoryStore, code_snippet_id: str | None, user_id: str
) -> str | None:
    """
    Resolve an optional code snippet reference owned by ``user_id``.

    Raises:
        RecordNotFoundError: If an id is given but the user has no snippet with it
    """
    if code_snippet_id is None:
        return None
    snippet = store.get_by_id(RecordKind.CODE_SNIPPET, code_snippet_id)
    if snippet is None or snippet.user_id != user_id:
        raise RecordNotFoundError(f"Code snippet '{code_snippet_id}' not found")
    return code_snippet_id
