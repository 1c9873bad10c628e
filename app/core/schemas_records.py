"""Pydantic models for persisted records.

Attributes are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Phase(str, Enum):
    """SDLC phase a requirement sentence is classified into."""

    REQUIREMENTS = "Requirements"
    DESIGN = "Design"
    DEVELOPMENT = "Development"
    TESTING = "Testing"
    DEPLOYMENT = "Deployment"


SnippetType = Literal["generated", "fixed", "original"]
DocStyle = Literal["technical", "user-guide", "api", "comments"]

DOC_STYLES: tuple[str, ...] = ("technical", "user-guide", "api", "comments")


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordBase(CamelModel):
    """Fields shared by every persisted record."""

    id: str
    created_at: datetime
    user_id: str | None = None


class User(RecordBase):
    username: str
    password: str = Field(..., exclude=True)
    email: str


class Document(RecordBase):
    filename: str
    content: str
    page_count: int | None = None


class Requirement(RecordBase):
    document_id: str | None = None
    text: str
    phase: Phase
    confidence: int = Field(..., ge=0, le=100)
    user_story: str | None = None


class CodeSnippet(RecordBase):
    title: str
    description: str | None = None
    language: str
    code: str
    generated_code: str | None = None
    type: SnippetType


class TestCase(RecordBase):
    __test__ = False  # not a pytest test class

    code_snippet_id: str | None = None
    framework: str
    test_code: str
    coverage: int | None = Field(default=None, ge=0, le=100)
    total_tests: int | None = Field(default=None, ge=0)


class MethodDoc(CamelModel):
    """One documented method: signature-ish name plus a description."""

    name: str
    description: str = ""


class Documentation(RecordBase):
    code_snippet_id: str | None = None
    style: DocStyle
    overview: str | None = None
    features: list[str] | None = None
    methods: list[MethodDoc] | None = None
    example: str | None = None


class ChatMessage(RecordBase):
    message: str
    response: str


Record = User | Document | Requirement | CodeSnippet | TestCase | Documentation | ChatMessage
