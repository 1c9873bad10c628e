"""Tests for the in-memory record store."""

import threading

import pytest

from app.core.errors import ReferenceIntegrityError, StoreError
from app.core.schemas_records import Phase
from app.db.memory_store import DEFAULT_USER_ID, MemoryStore, RecordKind


def make_snippet(store: MemoryStore, **overrides):
    fields = {
        "user_id": DEFAULT_USER_ID,
        "title": "Generated python Code",
        "language": "python",
        "code": "reverse a string",
        "type": "generated",
        **overrides,
    }
    return store.create(RecordKind.CODE_SNIPPET, fields)


class TestCreate:
    def test_seeds_default_user(self, store: MemoryStore) -> None:
        user = store.get_by_id(RecordKind.USER, DEFAULT_USER_ID)
        assert user is not None
        assert user.username == "developer"

    def test_unseeded_store_is_empty(self) -> None:
        store = MemoryStore(seed_default_user=False)
        assert store.get_by_id(RecordKind.USER, DEFAULT_USER_ID) is None

    def test_create_then_get_returns_equal_record(self, store: MemoryStore) -> None:
        created = make_snippet(store)
        fetched = store.get_by_id(RecordKind.CODE_SNIPPET, created.id)
        assert fetched == created

    def test_optional_fields_default_to_none(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        assert snippet.description is None
        assert snippet.generated_code is None

    def test_assigns_fresh_ids_and_timestamps(self, store: MemoryStore) -> None:
        first = make_snippet(store)
        second = make_snippet(store)
        assert first.id != second.id
        assert first.created_at.tzinfo is not None

    def test_caller_supplied_id_is_ignored(self, store: MemoryStore) -> None:
        snippet = make_snippet(store, id="chosen-id")
        assert snippet.id != "chosen-id"

    def test_accepts_camel_case_fields(self, store: MemoryStore) -> None:
        snippet = make_snippet(store, generatedCode="print('hi')")
        assert snippet.generated_code == "print('hi')"

    def test_invalid_fields_raise_store_error(self, store: MemoryStore) -> None:
        with pytest.raises(StoreError):
            make_snippet(store, type="mystery")

    def test_confidence_must_be_percentage(self, store: MemoryStore) -> None:
        with pytest.raises(StoreError):
            store.create(
                RecordKind.REQUIREMENT,
                {"text": "Users log in", "phase": Phase.DESIGN, "confidence": 140},
            )

    def test_unknown_owner_is_rejected(self, store: MemoryStore) -> None:
        with pytest.raises(ReferenceIntegrityError):
            make_snippet(store, user_id="ghost")
        assert store.list_where(RecordKind.CODE_SNIPPET) == []

    def test_unknown_document_reference_is_rejected(self, store: MemoryStore) -> None:
        with pytest.raises(ReferenceIntegrityError):
            store.create(
                RecordKind.REQUIREMENT,
                {
                    "document_id": "missing",
                    "text": "Users log in",
                    "phase": Phase.REQUIREMENTS,
                    "confidence": 80,
                },
            )

    def test_returned_records_are_copies(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        snippet.title = "changed"
        assert store.get_by_id(RecordKind.CODE_SNIPPET, snippet.id).title != "changed"

    def test_duplicate_usernames_are_not_rejected(self, store: MemoryStore) -> None:
        store.create(
            RecordKind.USER,
            {"username": "developer", "password": "x", "email": "other@company.com"},
        )
        assert len(store.list_where(RecordKind.USER, username="developer")) == 2

    def test_concurrent_creates_do_not_collide(self, store: MemoryStore) -> None:
        def worker() -> None:
            for _ in range(50):
                make_snippet(store)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snippets = store.list_by_owner(RecordKind.CODE_SNIPPET, DEFAULT_USER_ID)
        assert len(snippets) == 400
        assert len({s.id for s in snippets}) == 400


class TestQueries:
    def test_list_by_owner_keeps_insertion_order(self, store: MemoryStore) -> None:
        titles = ["first", "second", "third"]
        for title in titles:
            make_snippet(store, title=title)
        listed = store.list_by_owner(RecordKind.CODE_SNIPPET, DEFAULT_USER_ID)
        assert [s.title for s in listed] == titles

    def test_list_by_owner_filters_other_users(self, store: MemoryStore) -> None:
        other = store.create(
            RecordKind.USER, {"username": "other", "password": "pw", "email": "o@x.com"}
        )
        make_snippet(store)
        make_snippet(store, user_id=other.id)
        assert len(store.list_by_owner(RecordKind.CODE_SNIPPET, other.id)) == 1

    def test_get_by_id_unknown_returns_none(self, store: MemoryStore) -> None:
        assert store.get_by_id(RecordKind.DOCUMENT, "nope") is None

    def test_get_user_by_username(self, store: MemoryStore) -> None:
        assert store.get_user_by_username("developer").id == DEFAULT_USER_ID
        assert store.get_user_by_username("nobody") is None

    def test_requirements_for_document(self, store: MemoryStore) -> None:
        doc = store.create(
            RecordKind.DOCUMENT,
            {"user_id": DEFAULT_USER_ID, "filename": "reqs.pdf", "content": "text"},
        )
        store.create(
            RecordKind.REQUIREMENT,
            {"document_id": doc.id, "text": "Deploy nightly", "phase": "Deployment", "confidence": 70},
        )
        found = store.list_requirements_for_document(doc.id)
        assert [r.phase for r in found] == [Phase.DEPLOYMENT]

    def test_records_for_code_snippet(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        store.create(
            RecordKind.TEST_CASE,
            {"code_snippet_id": snippet.id, "framework": "pytest", "test_code": "def test(): ..."},
        )
        assert len(store.list_for_code_snippet(RecordKind.TEST_CASE, snippet.id)) == 1
        assert store.list_for_code_snippet(RecordKind.DOCUMENTATION, snippet.id) == []

    def test_records_for_code_snippet_rejects_other_kinds(self, store: MemoryStore) -> None:
        with pytest.raises(StoreError):
            store.list_for_code_snippet(RecordKind.CHAT_MESSAGE, "x")


class TestUpdate:
    def test_merges_fields(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        updated = store.update(
            RecordKind.CODE_SNIPPET, snippet.id, {"generated_code": "fixed()", "type": "fixed"}
        )
        assert updated.generated_code == "fixed()"
        assert updated.type == "fixed"
        assert updated.title == snippet.title
        assert store.get_by_id(RecordKind.CODE_SNIPPET, snippet.id) == updated

    def test_unknown_id_returns_none_and_changes_nothing(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        before = store.list_where(RecordKind.CODE_SNIPPET)

        assert store.update(RecordKind.CODE_SNIPPET, "missing", {"title": "x"}) is None
        assert store.list_where(RecordKind.CODE_SNIPPET) == before
        assert store.get_by_id(RecordKind.CODE_SNIPPET, "missing") is None
        assert store.get_by_id(RecordKind.CODE_SNIPPET, snippet.id) == snippet

    def test_immutable_fields_cannot_change(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        with pytest.raises(StoreError):
            store.update(RecordKind.CODE_SNIPPET, snippet.id, {"id": "other"})
        with pytest.raises(StoreError):
            store.update(RecordKind.CODE_SNIPPET, snippet.id, {"user_id": None})

    def test_invalid_update_leaves_record_intact(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        with pytest.raises(StoreError):
            store.update(RecordKind.CODE_SNIPPET, snippet.id, {"type": "bogus"})
        assert store.get_by_id(RecordKind.CODE_SNIPPET, snippet.id) == snippet

    def test_concurrent_updates_and_creates_lose_nothing(self, store: MemoryStore) -> None:
        snippet = make_snippet(store)
        fields = ("title", "description", "generated_code", "language")

        def updater(field: str) -> None:
            for i in range(50):
                store.update(RecordKind.CODE_SNIPPET, snippet.id, {field: f"{field}-{i}"})

        def creator() -> None:
            for _ in range(50):
                make_snippet(store)

        threads = [threading.Thread(target=updater, args=(f,)) for f in fields]
        threads += [threading.Thread(target=creator) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        final = store.get_by_id(RecordKind.CODE_SNIPPET, snippet.id)
        for field in fields:
            assert getattr(final, field) == f"{field}-49"
        assert final.code == snippet.code
        assert len(store.list_where(RecordKind.CODE_SNIPPET)) == 1 + 4 * 50

    def test_user_password_survives_update(self, store: MemoryStore) -> None:
        updated = store.update(RecordKind.USER, DEFAULT_USER_ID, {"email": "new@company.com"})
        assert updated.email == "new@company.com"
        assert updated.password == "password"
