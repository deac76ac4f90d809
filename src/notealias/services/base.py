"""BaseService — shared foundation for all notealias services.

Every service receives a :class:`Store` at construction time and owns its
transaction boundaries via ``self._store.transaction()``. Stored rows are
turned into domain models here, and every load is checked against the
alias invariants before a service acts on it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from notealias.domain.models import Alias, Document, InvariantViolationError
from notealias.infrastructure.repositories.documents import WriteConflictError
from notealias.services.contracts import DocumentData, dump_validated
from notealias.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from notealias.config.settings import NoteAliasSettings
    from notealias.infrastructure.store import Store, StoreTransaction

logger = structlog.get_logger(__name__)


def public_id_of(document: Document | str) -> str:
    """Accept either a loaded document or its public ID."""
    if isinstance(document, Document):
        return document.public_id
    return document


class BaseService:
    """Base for service-layer classes.

    Usage::

        class AliasService(BaseService):
            def add_alias(self, document, name) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @property
    def _settings(self) -> NoteAliasSettings:
        return self._store.settings

    def _load_document(
        self,
        txn: StoreTransaction,
        public_id: str,
    ) -> Document | None:
        """Load a document inside *txn*, or None if it does not exist.

        Raises:
            InvariantViolationError: The stored document is inconsistent.
        """
        return self._build_document(txn.documents.find_by_public_id(public_id))

    @staticmethod
    def _build_document(row: dict[str, Any] | None) -> Document | None:
        """Turn a stored document row into a checked :class:`Document`.

        Raises:
            InvariantViolationError: The stored document is inconsistent.
        """
        if row is None:
            return None
        document = Document(
            public_id=row["public_id"],
            version=row["version"],
            created=row["created"],
            modified=row["modified"],
            aliases=[Alias.model_validate(a) for a in row["aliases"]],
        )
        document.check_invariants()
        return document

    def _document_result(self, op: str, document: Document, **meta: object) -> ServiceResult:
        primary = document.primary_alias
        data = dump_validated(
            DocumentData,
            {
                "public_id": document.public_id,
                "version": document.version,
                "primary_alias": primary.name if primary is not None else None,
                "aliases": [{"name": a.name, "primary": a.primary} for a in document.aliases],
                "created": document.created,
                "modified": document.modified,
            },
        )
        return ServiceResult(ok=True, op=op, data=data, meta=dict(meta) or None)

    @staticmethod
    def _invariant_failure(op: str, exc: InvariantViolationError) -> ServiceResult:
        logger.error(
            "alias.invariant_violation",
            op=op,
            public_id=exc.public_id,
            problems=exc.problems,
        )
        return failure(
            op,
            ErrorCode.INVARIANT_VIOLATION,
            f"Document {exc.public_id} is in an inconsistent state",
            public_id=exc.public_id,
            problems=exc.problems,
        )

    @staticmethod
    def _write_conflict(op: str, public_id: str | None, exc: WriteConflictError) -> ServiceResult:
        """The store stayed locked by another writer past ``store.busy_timeout``."""
        logger.error("store.write_conflict", op=op, public_id=public_id, error=str(exc))
        return failure(
            op,
            ErrorCode.INVARIANT_VIOLATION,
            "The store is busy with a concurrent write; nothing was changed",
            public_id=public_id,
            reason="write_conflict",
        )

    @staticmethod
    def _document_not_found(op: str, public_id: str) -> ServiceResult:
        return failure(
            op,
            ErrorCode.NOT_FOUND,
            f"No document found with public ID: {public_id}",
            public_id=public_id,
        )
