"""Pydantic schemas for API requests and responses.

Required request fields are declared optional here and checked by the
handlers, so a missing or blank value produces the same ``{"error": ...}``
400 response as any other validation failure.
"""

from pydantic import Field

from app.core.schemas_records import (
    ChatMessage,
    CodeSnippet,
    CamelModel,
    Document,
    Documentation,
    Requirement,
    TestCase,
)

# =======================
# Requirements upload
# =======================


class UploadRequirementsResponse(CamelModel):
    document: Document
    requirements: list[Requirement]
    statistics: dict[str, int]
    extracted_text: str


# =======================
# Code generation / fixing / summarization
# =======================


class GenerateCodeRequest(CamelModel):
    description: str | None = None
    language: str | None = None
    framework: str | None = None


class GenerateCodeResponse(CamelModel):
    code_snippet: CodeSnippet
    suggestions: list[str] = Field(default_factory=list)


class FixCodeRequest(CamelModel):
    code: str | None = None
    language: str | None = None
    code_snippet_id: str | None = Field(
        default=None, description="Attach the fix to this existing snippet"
    )


class FixCodeResponse(CamelModel):
    code_snippet: CodeSnippet
    issues: list[str] = Field(default_factory=list)
    optimizations: list[str] = Field(default_factory=list)


class SummarizeCodeRequest(CamelModel):
    code: str | None = None
    style: str | None = None
    code_snippet_id: str | None = None


class SummarizeCodeResponse(CamelModel):
    documentation: Documentation


# =======================
# Test generation
# =======================


class GenerateTestsRequest(CamelModel):
    code: str | None = None
    framework: str | None = None
    input_type: str | None = Field(default=None, description="'code' or 'requirements'")
    code_snippet_id: str | None = None


class TestStatistics(CamelModel):
    __test__ = False  # not a pytest test class

    total: int
    positive: int
    negative: int


class GenerateTestsResponse(CamelModel):
    test_case: TestCase
    statistics: TestStatistics


# =======================
# Chat
# =======================


class ChatRequest(CamelModel):
    message: str | None = None


class ChatResponse(CamelModel):
    chat_message: ChatMessage
    response: str
