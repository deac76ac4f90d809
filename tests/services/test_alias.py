"""Tests for AliasService — add, remove, promote, view."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import update

from notealias.domain.models import Document
from notealias.infrastructure.database.schema import aliases
from notealias.infrastructure.repositories.aliases import AliasStore
from notealias.infrastructure.repositories.documents import DocumentStore, WriteConflictError
from notealias.infrastructure.store import Store
from notealias.services.alias import AliasService
from notealias.services.lookup import LookupService
from tests.conftest import FORBIDDEN_NAME, aliases_of, create_document


def _add(store: Store, public_id: str, name: str) -> dict[str, Any]:
    result = AliasService(store).add_alias(public_id, name)
    assert result.ok, result.error
    return result.data


def _primary_count(store: Store, public_id: str) -> int:
    doc = LookupService(store).find(public_id)
    assert doc is not None
    return sum(1 for a in doc.aliases if a.primary)


# ---------------------------------------------------------------------------
# add_alias
# ---------------------------------------------------------------------------


class TestAddAlias:
    def test_first_alias_is_primary(self, store: Store) -> None:
        doc = create_document(store)
        data = _add(store, doc["public_id"], "testAlias")
        assert aliases_of(data) == [("testAlias", True)]
        assert data["primary_alias"] == "testAlias"

    def test_second_alias_is_not_primary(self, store: Store) -> None:
        doc = create_document(store, "aliasTest")
        data = _add(store, doc["public_id"], "normalAlias")
        assert aliases_of(data) == [("aliasTest", True), ("normalAlias", False)]
        assert data["primary_alias"] == "aliasTest"

        view = AliasService(store).to_alias_view("normalAlias", doc["public_id"])
        assert view.ok
        assert view.data == {
            "name": "normalAlias",
            "primary": False,
            "public_id": doc["public_id"],
        }

    def test_accepts_document_model(self, store: Store) -> None:
        doc = create_document(store)
        model = LookupService(store).find(doc["public_id"])
        assert isinstance(model, Document)
        result = AliasService(store).add_alias(model, "from-model")
        assert result.ok

    def test_bumps_version(self, store: Store) -> None:
        doc = create_document(store)
        data = _add(store, doc["public_id"], "a")
        assert data["version"] == doc["version"] + 1

    def test_insertion_order_preserved(self, store: Store) -> None:
        doc = create_document(store)
        for name in ("c", "a", "b"):
            data = _add(store, doc["public_id"], name)
        assert [n for n, _ in aliases_of(data)] == ["c", "a", "b"]

    def test_forbidden_name(self, store: Store) -> None:
        doc = create_document(store)
        result = AliasService(store).add_alias(doc["public_id"], FORBIDDEN_NAME)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "FORBIDDEN_NAME"

    def test_forbidden_name_is_case_sensitive(self, store: Store) -> None:
        doc = create_document(store)
        result = AliasService(store).add_alias(doc["public_id"], FORBIDDEN_NAME.upper())
        assert result.ok

    def test_forbidden_checked_first(self, store: Store) -> None:
        result = AliasService(store).add_alias("no-such-document", FORBIDDEN_NAME)
        assert result.error is not None
        assert result.error.code == "FORBIDDEN_NAME"

    def test_alias_used_by_other_document(self, store: Store) -> None:
        create_document(store, "taken")
        other = create_document(store)
        result = AliasService(store).add_alias(other["public_id"], "taken")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"
        assert "already used" in result.error.message

    def test_alias_used_by_same_document(self, store: Store) -> None:
        doc = create_document(store, "mine")
        result = AliasService(store).add_alias(doc["public_id"], "mine")
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

    def test_alias_equal_to_other_public_id(self, store: Store) -> None:
        first = create_document(store)
        second = create_document(store)
        result = AliasService(store).add_alias(second["public_id"], first["public_id"])
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"
        assert "public id" in result.error.message

    def test_alias_equal_to_own_public_id(self, store: Store) -> None:
        doc = create_document(store)
        result = AliasService(store).add_alias(doc["public_id"], doc["public_id"])
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

    def test_unknown_document(self, store: Store) -> None:
        result = AliasService(store).add_alias("missing-doc", "fine")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_failed_add_leaves_document_untouched(self, store: Store) -> None:
        doc = create_document(store, "a")
        AliasService(store).add_alias(doc["public_id"], FORBIDDEN_NAME)
        found = LookupService(store).find(doc["public_id"])
        assert found is not None
        assert found.alias_names == ["a"]
        assert found.version == doc["version"]

    def test_store_conflict_maps_to_already_exists(
        self, store: Store, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A racing writer that slipped past the checks hits the name index."""
        create_document(store, "raced")
        other = create_document(store)
        monkeypatch.setattr(AliasStore, "find_by_name", lambda self, name: None)
        result = AliasService(store).add_alias(other["public_id"], "raced")
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

        monkeypatch.undo()
        found = LookupService(store).find(other["public_id"])
        assert found is not None
        assert found.aliases == []


# ---------------------------------------------------------------------------
# remove_alias
# ---------------------------------------------------------------------------


class TestRemoveAlias:
    def test_remove_non_primary(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        result = AliasService(store).remove_alias(doc["public_id"], "b")
        assert result.ok
        assert aliases_of(result.data) == [("a", True)]

    def test_primary_removal_forbidden_while_others_remain(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        result = AliasService(store).remove_alias(doc["public_id"], "a")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "PRIMARY_REMOVAL_FORBIDDEN"

        found = LookupService(store).find(doc["public_id"])
        assert found is not None
        assert found.alias_names == ["a", "b"]

    def test_remove_sole_primary(self, store: Store) -> None:
        doc = create_document(store, "a")
        result = AliasService(store).remove_alias(doc["public_id"], "a")
        assert result.ok
        assert result.data["aliases"] == []
        assert result.data["primary_alias"] is None

    def test_remove_unknown(self, store: Store) -> None:
        doc = create_document(store, "a")
        result = AliasService(store).remove_alias(doc["public_id"], "zzz")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_remove_alias_of_other_document(self, store: Store) -> None:
        create_document(store, "theirs")
        mine = create_document(store, "mine")
        result = AliasService(store).remove_alias(mine["public_id"], "theirs")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_never_auto_promotes(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        _add(store, doc["public_id"], "c")
        data = AliasService(store).remove_alias(doc["public_id"], "b").data
        assert aliases_of(data) == [("a", True), ("c", False)]

    def test_removed_name_is_reusable_elsewhere(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        AliasService(store).remove_alias(doc["public_id"], "b")
        other = create_document(store)
        data = _add(store, other["public_id"], "b")
        assert aliases_of(data) == [("b", True)]

    def test_re_validates_against_current_state(self, store: Store) -> None:
        """A stale snapshot with one alias does not allow removing the primary."""
        doc = create_document(store, "a")
        stale = LookupService(store).find(doc["public_id"])
        assert stale is not None
        _add(store, doc["public_id"], "b")
        result = AliasService(store).remove_alias(stale, "a")
        assert result.error is not None
        assert result.error.code == "PRIMARY_REMOVAL_FORBIDDEN"


# ---------------------------------------------------------------------------
# make_alias_primary
# ---------------------------------------------------------------------------


class TestMakeAliasPrimary:
    def test_promote(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        result = AliasService(store).make_alias_primary(doc["public_id"], "b")
        assert result.ok
        assert aliases_of(result.data) == [("a", False), ("b", True)]
        assert result.data["primary_alias"] == "b"
        assert result.meta is not None
        assert result.meta["changed"] is True

    def test_repeat_is_noop(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        svc = AliasService(store)
        first = svc.make_alias_primary(doc["public_id"], "b")
        second = svc.make_alias_primary(doc["public_id"], "b")
        assert second.ok
        assert second.data == first.data
        assert second.meta is not None
        assert second.meta["changed"] is False

    def test_current_primary_is_noop(self, store: Store) -> None:
        doc = create_document(store, "a")
        result = AliasService(store).make_alias_primary(doc["public_id"], "a")
        assert result.ok
        assert result.data["version"] == doc["version"]

    def test_unknown_alias(self, store: Store) -> None:
        doc = create_document(store, "a")
        result = AliasService(store).make_alias_primary(doc["public_id"], "nope")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_alias_of_other_document(self, store: Store) -> None:
        create_document(store, "theirs")
        mine = create_document(store, "mine")
        result = AliasService(store).make_alias_primary(mine["public_id"], "theirs")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_retries_transient_conflict(
        self, store: Store, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")

        original = DocumentStore.save
        calls = {"n": 0}

        def flaky_save(self: DocumentStore, public_id: str, **kwargs: Any) -> int:
            calls["n"] += 1
            if calls["n"] == 1:
                raise WriteConflictError("simulated")
            return original(self, public_id, **kwargs)

        monkeypatch.setattr(DocumentStore, "save", flaky_save)
        result = AliasService(store).make_alias_primary(doc["public_id"], "b")
        assert result.ok
        assert result.meta is not None
        assert result.meta["attempts"] == 2
        assert result.data["primary_alias"] == "b"

    def test_gives_up_after_bounded_retries(
        self, store: Store, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        calls = {"n": 0}

        def always_conflict(self: DocumentStore, public_id: str, **kwargs: Any) -> int:
            calls["n"] += 1
            raise WriteConflictError("simulated")

        monkeypatch.setattr(DocumentStore, "save", always_conflict)
        result = AliasService(store).make_alias_primary(doc["public_id"], "b")
        assert result.error is not None
        assert result.error.code == "INVARIANT_VIOLATION"
        assert calls["n"] == store.settings.store.max_retries + 1

        monkeypatch.undo()
        found = LookupService(store).find(doc["public_id"])
        assert found is not None
        assert found.primary_alias is not None
        assert found.primary_alias.name == "a"


# ---------------------------------------------------------------------------
# to_alias_view
# ---------------------------------------------------------------------------


class TestToAliasView:
    def test_view_primary(self, store: Store) -> None:
        doc = create_document(store, "a")
        result = AliasService(store).to_alias_view("a", doc["public_id"])
        assert result.ok
        assert result.data == {"name": "a", "primary": True, "public_id": doc["public_id"]}

    def test_view_without_document_uses_owner(self, store: Store) -> None:
        doc = create_document(store, "a")
        result = AliasService(store).to_alias_view("a")
        assert result.data["public_id"] == doc["public_id"]

    def test_view_unknown(self, store: Store) -> None:
        result = AliasService(store).to_alias_view("ghost")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


# ---------------------------------------------------------------------------
# Inconsistent stored state
# ---------------------------------------------------------------------------


class TestInvariantViolation:
    def test_document_without_primary_is_reported(self, store: Store) -> None:
        doc = create_document(store, "a")
        _add(store, doc["public_id"], "b")
        with store.engine.begin() as conn:
            conn.execute(update(aliases).values(is_primary=0))

        svc = AliasService(store)
        for result in (
            svc.add_alias(doc["public_id"], "c"),
            svc.remove_alias(doc["public_id"], "b"),
            svc.make_alias_primary(doc["public_id"], "b"),
            LookupService(store).resolve(doc["public_id"]),
        ):
            assert not result.ok
            assert result.error is not None
            assert result.error.code == "INVARIANT_VIOLATION"


# ---------------------------------------------------------------------------
# Invariants across a sequence of operations
# ---------------------------------------------------------------------------


class TestInvariantsHold:
    def test_single_primary_after_every_operation(self, store: Store) -> None:
        doc = create_document(store)
        pid = doc["public_id"]
        svc = AliasService(store)
        steps = [
            lambda: svc.add_alias(pid, "a"),
            lambda: svc.add_alias(pid, "b"),
            lambda: svc.add_alias(pid, "c"),
            lambda: svc.make_alias_primary(pid, "c"),
            lambda: svc.remove_alias(pid, "c"),  # forbidden
            lambda: svc.remove_alias(pid, "a"),
            lambda: svc.make_alias_primary(pid, "b"),
            lambda: svc.remove_alias(pid, "c"),
            lambda: svc.remove_alias(pid, "b"),
        ]
        for step in steps:
            step()
            found = LookupService(store).find(pid)
            assert found is not None
            expected = 1 if found.aliases else 0
            assert _primary_count(store, pid) == expected

        final = LookupService(store).find(pid)
        assert final is not None
        assert final.aliases == []
