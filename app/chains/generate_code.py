"""LLM chain for generating code from a natural-language description."""

from openai import OpenAI

from app.core.config import Settings, get_settings
from app.core.llm import cap_input, get_openai_client, request_json_completion
from app.core.logging import get_logger
from app.core.schemas_ai import CodeGenerationResult

logger = get_logger(__name__)

SYSTEM_PROMPT_TEMPLATE = (
    "You are an expert {language} developer. Generate clean, production-ready code "
    "with proper error handling and best practices."
)

USER_PROMPT_TEMPLATE = """Generate production-ready {language} code{framework_text} based on the following description:

{description}

Respond with JSON in this exact format:
{{
  "code": "// Generated code here",
  "suggestions": [
    "suggestion 1",
    "suggestion 2"
  ]
}}

Make the code clean, well-commented, and follow best practices."""

TEMPERATURE = 0.2


def build_code_prompt(description: str, language: str, framework: str | None = None) -> str:
    framework_text = f" using the {framework} framework" if framework else ""
    return USER_PROMPT_TEMPLATE.format(
        language=language, framework_text=framework_text, description=description
    )


def generate_code(
    description: str,
    language: str = "python",
    framework: str | None = None,
    *,
    settings: Settings | None = None,
    client: OpenAI | None = None,
) -> CodeGenerationResult:
    """
    Generate code for a description.

    Returns:
        CodeGenerationResult; ``code`` is empty when the model omitted it

    Raises:
        AIServiceError: If the model call fails or returns unparseable output
    """
    settings = settings or get_settings()
    client = client or get_openai_client(settings)

    payload = request_json_completion(
        client,
        task="Code generation",
        model=settings.OPENAI_MODEL,
        system_prompt=SYSTEM_PROMPT_TEMPLATE.format(language=language),
        user_prompt=build_code_prompt(cap_input(description, settings), language, framework),
        temperature=TEMPERATURE,
    )
    result = CodeGenerationResult.decode(payload)

    if result.defaulted_fields:
        logger.warning(f"Code generation response defaulted fields: {result.defaulted_fields}")
    return result
