"""LLM chain for the SDLC assistant chatbot."""

from openai import OpenAI

from app.core.config import Settings, get_settings
from app.core.llm import cap_input, get_openai_client, request_text_completion

SYSTEM_PROMPT = (
    "You are an expert SDLC consultant and software development mentor. "
    "Provide helpful, accurate guidance on software development practices."
)

USER_PROMPT_TEMPLATE = """You are an AI assistant specialized in Software Development Lifecycle (SDLC).
Provide helpful, accurate answers about SDLC phases, best practices, testing, code review, requirements analysis, and software development methodologies.

User question: {message}

Provide a clear, helpful response. If the question is about SDLC topics, give detailed explanations with examples.
If it's about code or technical topics, provide practical advice."""

FALLBACK_REPLY = "I'm sorry, I couldn't process your request. Please try again."

TEMPERATURE = 0.7


def chat_response(
    message: str,
    *,
    settings: Settings | None = None,
    client: OpenAI | None = None,
) -> str:
    """
    Answer a free-form question.

    Returns:
        The model's reply, or FALLBACK_REPLY if it was empty

    Raises:
        AIServiceError: If the model call fails
    """
    settings = settings or get_settings()
    client = client or get_openai_client(settings)

    reply = request_text_completion(
        client,
        task="Chat response",
        model=settings.OPENAI_MODEL,
        system_prompt=SYSTEM_PROMPT,
        user_prompt=USER_PROMPT_TEMPLATE.format(message=cap_input(message, settings)),
        temperature=TEMPERATURE,
        max_tokens=settings.CHAT_MAX_TOKENS,
    )
    return reply or FALLBACK_REPLY
