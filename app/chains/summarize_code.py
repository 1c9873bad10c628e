"""LLM chain for documenting a code snippet in a requested style."""

from openai import OpenAI

from app.core.config import Settings, get_settings
from app.core.llm import cap_input, get_openai_client, request_json_completion
from app.core.logging import get_logger
from app.core.schemas_ai import DocumentationResult

logger = get_logger(__name__)

SYSTEM_PROMPT_TEMPLATE = (
    "You are a technical writer specializing in {style} documentation. "
    "Create clear, comprehensive documentation."
)

USER_PROMPT_TEMPLATE = """Analyze the following code and generate {style} documentation.

Code to analyze:
{code}

Respond with JSON in this exact format:
{{
  "overview": "Brief overview of what this code does",
  "features": [
    "Feature 1",
    "Feature 2"
  ],
  "methods": [
    {{
      "name": "method_name(params)",
      "description": "What this method does"
    }}
  ],
  "example": "// Usage example code"
}}

Make the documentation clear and {tone}."""

TEMPERATURE = 0.3


def build_summary_prompt(code: str, style: str) -> str:
    tone = "user-friendly" if style == "user-guide" else "technically detailed"
    return USER_PROMPT_TEMPLATE.format(style=style, code=code, tone=tone)


def summarize_code(
    code: str,
    style: str = "technical",
    *,
    settings: Settings | None = None,
    client: OpenAI | None = None,
) -> DocumentationResult:
    """
    Generate documentation for ``code``.

    Raises:
        AIServiceError: If the model call fails or returns unparseable output
    """
    settings = settings or get_settings()
    client = client or get_openai_client(settings)

    payload = request_json_completion(
        client,
        task="Code summarization",
        model=settings.OPENAI_MODEL,
        system_prompt=SYSTEM_PROMPT_TEMPLATE.format(style=style),
        user_prompt=build_summary_prompt(cap_input(code, settings), style),
        temperature=TEMPERATURE,
    )
    result = DocumentationResult.decode(payload)

    if result.defaulted_fields:
        logger.warning(f"Summarization response defaulted fields: {result.defaulted_fields}")
    return result
