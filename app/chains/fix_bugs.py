"""LLM chain for finding and fixing bugs in a code snippet."""

from openai import OpenAI

from app.core.config import Settings, get_settings
from app.core.llm import cap_input, get_openai_client, request_json_completion
from app.core.logging import get_logger
from app.core.schemas_ai import BugFixResult

logger = get_logger(__name__)

SYSTEM_PROMPT_TEMPLATE = (
    "You are an expert {language} developer and code reviewer. Identify bugs, "
    "security issues, and optimization opportunities."
)

USER_PROMPT_TEMPLATE = """Analyze the following {language} code for bugs, errors, and optimization opportunities.
Fix all issues and provide the corrected code.

Code to analyze:
{code}

Respond with JSON in this exact format:
{{
  "fixedCode": "// Corrected code here",
  "issues": [
    "Issue 1 description",
    "Issue 2 description"
  ],
  "optimizations": [
    "Optimization 1 description",
    "Optimization 2 description"
  ]
}}"""

TEMPERATURE = 0.1


def fix_bugs(
    code: str,
    language: str = "python",
    *,
    settings: Settings | None = None,
    client: OpenAI | None = None,
) -> BugFixResult:
    """
    Ask the model to fix and optimize ``code``.

    ``fixed_code`` falls back to exactly the input code when the model omits
    it or returns something other than a string.

    Raises:
        AIServiceError: If the model call fails or returns unparseable output
    """
    settings = settings or get_settings()
    client = client or get_openai_client(settings)

    payload = request_json_completion(
        client,
        task="Bug fixing",
        model=settings.OPENAI_MODEL,
        system_prompt=SYSTEM_PROMPT_TEMPLATE.format(language=language),
        user_prompt=USER_PROMPT_TEMPLATE.format(language=language, code=cap_input(code, settings)),
        temperature=TEMPERATURE,
    )
    result = BugFixResult.decode(payload, fixed_code=code)

    if "fixed_code" in result.defaulted_fields:
        logger.warning("Bug fixing response had no fixedCode; returning the original code")
    return result
