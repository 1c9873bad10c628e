"""LLM chain for classifying requirement sentences into SDLC phases.

The model classifies each sentence and writes a user story for it. The phase
tally is counted locally from the accepted items; any statistics the model
returns are ignored.
"""

from typing import Any

from openai import OpenAI

from app.core.config import Settings, get_settings
from app.core.llm import cap_input, get_openai_client, request_json_completion
from app.core.logging import get_logger
from app.core.schemas_ai import ClassificationResult, ClassifiedRequirement, empty_phase_tally

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an expert SDLC analyst. Classify requirements into appropriate phases "
    "and generate user stories."
)

# ruff: noqa: E501
USER_PROMPT_TEMPLATE = """Analyze the following requirements document and classify each requirement sentence into SDLC phases.
For each sentence, determine the phase (Requirements, Design, Development, Testing, or Deployment) and generate a user story.

Text to analyze:
{text}

Respond with JSON in this exact format:
{{
  "requirements": [
    {{
      "text": "original sentence",
      "phase": "Requirements|Design|Development|Testing|Deployment",
      "confidence": 85,
      "userStory": "As a user, I want to..."
    }}
  ]
}}"""

TEMPERATURE = 0.3


def build_classification_prompt(text: str) -> str:
    return USER_PROMPT_TEMPLATE.format(text=text)


def tally_phases(requirements: list[ClassifiedRequirement]) -> dict[str, int]:
    """Count requirements per phase; every phase is present in the result."""
    tally = empty_phase_tally()
    for item in requirements:
        if item.phase is not None:
            tally[item.phase.value] += 1
    return tally


def decode_classification(payload: dict[str, Any]) -> ClassificationResult:
    """
    Decode a classification payload, keeping only usable items.

    Items without text or with an unknown phase label are dropped.
    """
    raw_items = payload.get("requirements")
    if not isinstance(raw_items, list):
        logger.warning("Classification response has no requirements list")
        raw_items = []

    accepted: list[ClassifiedRequirement] = []
    for raw in raw_items:
        item = ClassifiedRequirement.decode(raw)
        if item.is_usable:
            accepted.append(item)

    dropped = len(raw_items) - len(accepted)
    if dropped:
        logger.warning(
            f"Dropped {dropped} classified items without text or a known phase",
            extra={"extra_data": {"dropped": dropped, "accepted": len(accepted)}},
        )

    return ClassificationResult(
        requirements=accepted,
        statistics=tally_phases(accepted),
        dropped_items=dropped,
    )


def classify_requirements(
    text: str,
    *,
    settings: Settings | None = None,
    client: OpenAI | None = None,
) -> ClassificationResult:
    """
    Classify the sentences of a requirements document into SDLC phases.

    Args:
        text: Extracted document text
        settings: Application settings
        client: OpenAI client override

    Returns:
        ClassificationResult with accepted items and the local phase tally

    Raises:
        AIServiceError: If the model call fails or returns unparseable output
    """
    settings = settings or get_settings()
    client = client or get_openai_client(settings)

    payload = request_json_completion(
        client,
        task="Requirements classification",
        model=settings.OPENAI_MODEL,
        system_prompt=SYSTEM_PROMPT,
        user_prompt=build_classification_prompt(cap_input(text, settings)),
        temperature=TEMPERATURE,
    )
    result = decode_classification(payload)

    logger.info(
        f"Classified {len(result.requirements)} requirements",
        extra={"extra_data": result.statistics},
    )
    return result
