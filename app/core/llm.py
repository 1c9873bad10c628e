"""OpenAI client utilities shared by the chains."""

import json
import re
from functools import lru_cache
from typing import Any

from openai import OpenAI, OpenAIError

from app.core.config import Settings, get_settings
from app.core.errors import AIServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache
def _cached_client(api_key: str, timeout: float) -> OpenAI:
    # The SDK retries by default; calls here are one-shot
    return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)


def get_openai_client(settings: Settings | None = None) -> OpenAI:
    """
    Get a configured OpenAI client.

    Args:
        settings: Settings override (defaults to cached settings)

    Returns:
        OpenAI client with the configured timeout and retries disabled
    """
    settings = settings or get_settings()
    return _cached_client(settings.OPENAI_API_KEY, settings.OPENAI_TIMEOUT_SECONDS)


def cap_input(text: str, settings: Settings | None = None) -> str:
    """Truncate user text to MAX_INPUT_CHARS before it is embedded in a prompt."""
    settings = settings or get_settings()
    if len(text) > settings.MAX_INPUT_CHARS:
        logger.warning(f"Input truncated from {len(text)} to {settings.MAX_INPUT_CHARS} chars")
        return text[: settings.MAX_INPUT_CHARS]
    return text


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    A reply wrapped in one outer fence keeps any fences inside it.
    """
    cleaned = raw_output.strip()

    outer_match = re.fullmatch(r"```(?:json)?[ \t]*\n?(.*)```", cleaned, re.DOTALL)
    if outer_match:
        return outer_match.group(1).strip()

    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_llm_json_dict(raw_output: str) -> dict:
    """
    Parse LLM output as a JSON object.

    The reply is parsed as-is first; markdown fences are stripped only when
    that fails, since string values (code, examples) may contain fences.

    Args:
        raw_output: Raw string from LLM response

    Returns:
        Parsed dict

    Raises:
        json.JSONDecodeError: If JSON parsing fails after cleanup
        TypeError: If the JSON value is not an object
    """
    try:
        parsed = json.loads(raw_output.strip())
    except json.JSONDecodeError:
        parsed = json.loads(_strip_llm_fences(raw_output))
    if not isinstance(parsed, dict):
        raise TypeError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _complete(client: OpenAI, task: str, **request: Any) -> str:
    try:
        response = client.chat.completions.create(**request)
    except OpenAIError as e:
        logger.error(f"{task} model call failed: {e}")
        raise AIServiceError(f"{task} failed: {e}") from e
    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


def request_json_completion(
    client: OpenAI,
    *,
    task: str,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
) -> dict[str, Any]:
    """
    Call the chat completions API in JSON mode and parse the reply.

    Args:
        client: OpenAI client
        task: Human-readable task name used in error messages
        model: Model name
        system_prompt: System message
        user_prompt: User message embedding the input and the output schema
        temperature: Sampling temperature

    Returns:
        Parsed JSON object (fields not yet validated)

    Raises:
        AIServiceError: If the call fails or the reply is not a JSON object
    """
    logger.info(f"Calling {model} for {task.lower()}")

    raw_output = _complete(
        client,
        task,
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        response_format={"type": "json_object"},
        temperature=temperature,
    )

    try:
        return parse_llm_json_dict(raw_output)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(
            f"{task} returned unparseable output: {e}",
            extra={"extra_data": {"output_preview": raw_output[:200]}},
        )
        # Do NOT leak raw model output in exception
        raise AIServiceError(f"{task} failed: model output is not a JSON object") from e


def request_text_completion(
    client: OpenAI,
    *,
    task: str,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: int | None = None,
) -> str:
    """
    Call the chat completions API for a free-text reply.

    Raises:
        AIServiceError: If the call fails
    """
    logger.info(f"Calling {model} for {task.lower()}")

    request: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
    }
    if max_tokens is not None:
        request["max_tokens"] = max_tokens

    return _complete(client, task, **request).strip()
