"""Read-only listings of the current user's records."""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user_id, get_store
from app.core.errors import RecordNotFoundError
from app.core.schemas_records import (
    ChatMessage,
    CodeSnippet,
    Document,
    Documentation,
    Requirement,
    TestCase,
)
from app.db.memory_store import MemoryStore, RecordKind

router = APIRouter()


@router.get("/documents", response_model=list[Document])
def list_documents(
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> list[Document]:
    return store.list_by_owner(RecordKind.DOCUMENT, user_id)


@router.get("/documents/{document_id}/requirements", response_model=list[Requirement])
def list_document_requirements(
    document_id: str,
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> list[Requirement]:
    document = store.get_by_id(RecordKind.DOCUMENT, document_id)
    if document is None or document.user_id != user_id:
        raise RecordNotFoundError("Document not found")
    return store.list_requirements_for_document(document_id)


@router.get("/code-snippets", response_model=list[CodeSnippet])
def list_code_snippets(
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> list[CodeSnippet]:
    return store.list_by_owner(RecordKind.CODE_SNIPPET, user_id)


@router.get("/code-snippets/{snippet_id}", response_model=CodeSnippet)
def get_code_snippet(
    snippet_id: str,
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> CodeSnippet:
    snippet = store.get_by_id(RecordKind.CODE_SNIPPET, snippet_id)
    if snippet is None or snippet.user_id != user_id:
        raise RecordNotFoundError("Code snippet not found")
    return snippet


@router.get("/test-cases", response_model=list[TestCase])
def list_test_cases(
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> list[TestCase]:
    return store.list_by_owner(RecordKind.TEST_CASE, user_id)


@router.get("/documentations", response_model=list[Documentation])
def list_documentations(
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> list[Documentation]:
    return store.list_by_owner(RecordKind.DOCUMENTATION, user_id)


@router.get("/chat-history", response_model=list[ChatMessage])
def list_chat_history(
    store: MemoryStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
) -> list[ChatMessage]:
    return store.list_by_owner(RecordKind.CHAT_MESSAGE, user_id)
