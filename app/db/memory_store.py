"""In-memory record store.

Volatile and single-process: records live as long as the store instance.
Each record kind is a separate insertion-ordered partition guarded by its own
lock, so concurrent ``create``/``update`` calls on a kind never lose writes.
There is no cross-kind transaction.
"""

import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from app.core.errors import ReferenceIntegrityError, StoreError
from app.core.logging import get_logger
from app.core.schemas_records import (
    ChatMessage,
    CodeSnippet,
    Document,
    Documentation,
    Record,
    RecordBase,
    Requirement,
    TestCase,
    User,
)

logger = get_logger(__name__)

DEFAULT_USER_ID = "default-user"


class RecordKind(str, Enum):
    USER = "user"
    DOCUMENT = "document"
    REQUIREMENT = "requirement"
    CODE_SNIPPET = "code_snippet"
    TEST_CASE = "test_case"
    DOCUMENTATION = "documentation"
    CHAT_MESSAGE = "chat_message"


RECORD_MODELS: dict[RecordKind, type[RecordBase]] = {
    RecordKind.USER: User,
    RecordKind.DOCUMENT: Document,
    RecordKind.REQUIREMENT: Requirement,
    RecordKind.CODE_SNIPPET: CodeSnippet,
    RecordKind.TEST_CASE: TestCase,
    RecordKind.DOCUMENTATION: Documentation,
    RecordKind.CHAT_MESSAGE: ChatMessage,
}

# Foreign-key field -> kind it must resolve to
REFERENCES: dict[str, RecordKind] = {
    "user_id": RecordKind.USER,
    "document_id": RecordKind.DOCUMENT,
    "code_snippet_id": RecordKind.CODE_SNIPPET,
}

IMMUTABLE_FIELDS = frozenset({"id", "created_at", "user_id"})


class MemoryStore:
    """Keyed record store partitioned by record kind."""

    def __init__(self, seed_default_user: bool = True):
        self._records: dict[RecordKind, dict[str, RecordBase]] = {
            kind: {} for kind in RecordKind
        }
        self._locks: dict[RecordKind, threading.Lock] = {
            kind: threading.Lock() for kind in RecordKind
        }
        if seed_default_user:
            self._insert(
                RecordKind.USER,
                User(
                    id=DEFAULT_USER_ID,
                    created_at=datetime.now(timezone.utc),
                    username="developer",
                    password="password",
                    email="dev@company.com",
                ),
            )

    def _insert(self, kind: RecordKind, record: RecordBase) -> None:
        with self._locks[kind]:
            self._records[kind][record.id] = record

    def _check_references(self, fields: dict[str, Any]) -> None:
        for field_name, target in REFERENCES.items():
            ref = fields.get(field_name)
            if ref is not None and ref not in self._records[target]:
                raise ReferenceIntegrityError(
                    f"{field_name} '{ref}' does not reference an existing {target.value}"
                )

    def create(self, kind: RecordKind, fields: dict[str, Any]) -> Record:
        """
        Create a record of ``kind``.

        A fresh identifier and creation timestamp are assigned; optional
        fields absent from ``fields`` take their null default.

        Args:
            kind: Record kind
            fields: Attribute values (snake_case or camelCase keys)

        Returns:
            Copy of the stored record

        Raises:
            StoreError: If ``fields`` do not satisfy the record model
            ReferenceIntegrityError: If a foreign reference does not resolve
        """
        model = RECORD_MODELS[kind]
        payload = {
            k: v for k, v in fields.items() if k not in ("id", "created_at", "createdAt")
        }
        payload["id"] = str(uuid.uuid4())
        payload["created_at"] = datetime.now(timezone.utc)

        try:
            record = model.model_validate(payload)
        except SchemaValidationError as e:
            raise StoreError(f"Invalid {kind.value} record: {e}") from e

        with self._locks[kind]:
            self._check_references(record.model_dump())
            self._records[kind][record.id] = record

        logger.debug(f"Created {kind.value} {record.id}")
        return record.model_copy(deep=True)

    def get_by_id(self, kind: RecordKind, record_id: str) -> Record | None:
        """Return a copy of the record, or None if it does not exist."""
        record = self._records[kind].get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    def list_where(self, kind: RecordKind, **criteria: Any) -> list[Record]:
        """List records whose attributes equal all ``criteria``, in insertion order."""
        with self._locks[kind]:
            records = list(self._records[kind].values())
        return [
            r.model_copy(deep=True)
            for r in records
            if all(getattr(r, name) == value for name, value in criteria.items())
        ]

    def list_by_owner(self, kind: RecordKind, user_id: str) -> list[Record]:
        """List records owned by ``user_id`` in insertion order."""
        return self.list_where(kind, user_id=user_id)

    def update(
        self, kind: RecordKind, record_id: str, partial_fields: dict[str, Any]
    ) -> Record | None:
        """
        Merge ``partial_fields`` into an existing record.

        Returns:
            Copy of the updated record, or None if ``record_id`` is unknown
            (the store is left unchanged)

        Raises:
            StoreError: If an immutable field would change or the merged
                record is invalid
        """
        model = RECORD_MODELS[kind]
        with self._locks[kind]:
            existing = self._records[kind].get(record_id)
            if existing is None:
                return None

            # Attribute access rather than model_dump: excluded fields must survive
            current = {name: getattr(existing, name) for name in model.model_fields}
            by_alias = {f.alias: name for name, f in model.model_fields.items() if f.alias}
            changes = {by_alias.get(k, k): v for k, v in partial_fields.items()}

            for name in IMMUTABLE_FIELDS & changes.keys():
                if changes[name] != current[name]:
                    raise StoreError(f"Field '{name}' of a {kind.value} is immutable")

            try:
                updated = model.model_validate({**current, **changes})
            except SchemaValidationError as e:
                raise StoreError(f"Invalid {kind.value} update: {e}") from e

            self._records[kind][record_id] = updated

        logger.debug(f"Updated {kind.value} {record_id}")
        return updated.model_copy(deep=True)

    # Convenience lookups

    def get_user_by_username(self, username: str) -> User | None:
        matches = self.list_where(RecordKind.USER, username=username)
        return matches[0] if matches else None

    def list_requirements_for_document(self, document_id: str) -> list[Requirement]:
        return self.list_where(RecordKind.REQUIREMENT, document_id=document_id)

    def list_for_code_snippet(self, kind: RecordKind, code_snippet_id: str) -> list[Record]:
        """List test cases or documentations attached to a code snippet."""
        if kind not in (RecordKind.TEST_CASE, RecordKind.DOCUMENTATION):
            raise StoreError(f"{kind.value} records do not reference code snippets")
        return self.list_where(kind, code_snippet_id=code_snippet_id)
