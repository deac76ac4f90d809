"""AliasService — invariant-preserving alias lifecycle.

Transitions over a document's aliases (see :mod:`notealias.domain.models`):

- add_alias:           NO_ALIAS -> SINGLE_PRIMARY (new alias is primary)
                       SINGLE_PRIMARY / MULTI_ALIAS -> MULTI_ALIAS
- remove_alias:        MULTI_ALIAS -> SINGLE_PRIMARY / MULTI_ALIAS (non-primary only)
                       SINGLE_PRIMARY -> NO_ALIAS
- make_alias_primary:  moves the primary flag, state unchanged

Each operation re-reads the document inside its own write transaction;
the caller's document snapshot only names the document. Name collisions
are caught twice: by the explicit checks (for a precise error message)
and by the ``names`` unique index (for racing writers), and both map to
``ALREADY_EXISTS``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError

from notealias.domain.models import AliasView, Document, InvariantViolationError
from notealias.infrastructure.database.schema import NAME_KIND_PUBLIC_ID
from notealias.infrastructure.repositories.documents import WriteConflictError
from notealias.services._helpers import now_iso
from notealias.services.base import BaseService, public_id_of
from notealias.services.contracts import AliasViewData, dump_validated
from notealias.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from collections.abc import Collection

    from notealias.infrastructure.store import StoreTransaction

logger = structlog.get_logger(__name__)


def check_new_alias(
    txn: StoreTransaction,
    op: str,
    name: str,
    forbidden_names: Collection[str],
) -> ServiceResult | None:
    """Run the add-alias checks in order; the first failure wins.

    Returns None when *name* may be used as a new alias.
    """
    if name in forbidden_names:
        logger.debug("alias.forbidden", name=name)
        return failure(
            op,
            ErrorCode.FORBIDDEN_NAME,
            f"The alias '{name}' is forbidden by the administrator.",
            name=name,
        )
    if txn.aliases.find_by_name(name) is not None:
        logger.debug("alias.already_used", name=name)
        return failure(
            op,
            ErrorCode.ALREADY_EXISTS,
            f"The alias '{name}' is already used.",
            name=name,
        )
    if txn.documents.name_taken(name) == NAME_KIND_PUBLIC_ID:
        logger.debug("alias.is_public_id", name=name)
        return failure(
            op,
            ErrorCode.ALREADY_EXISTS,
            f"The alias '{name}' is already a public id.",
            name=name,
        )
    return None


def name_conflict(op: str, name: str, exc: IntegrityError) -> ServiceResult:
    """Translate a unique-index violation on *name* into ``ALREADY_EXISTS``."""
    logger.info("alias.name_conflict", op=op, name=name, error=str(exc.orig))
    return failure(
        op,
        ErrorCode.ALREADY_EXISTS,
        f"The alias '{name}' is already used.",
        name=name,
    )


class AliasService(BaseService):
    """Adds, removes, promotes, and projects document aliases."""

    @property
    def forbidden_names(self) -> frozenset[str]:
        return self._settings.aliases.forbidden_names

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------

    def add_alias(self, document: Document | str, name: str) -> ServiceResult:
        """Add *name* as an alias of *document*.

        The first alias of a document becomes its primary; later aliases
        are appended as non-primary and leave the primary untouched.
        """
        op = "add_alias"
        public_id = public_id_of(document)

        try:
            with self._store.transaction() as txn:
                rejected = check_new_alias(txn, op, name, self.forbidden_names)
                if rejected is not None:
                    return rejected

                current = self._load_document(txn, public_id)
                if current is None:
                    return self._document_not_found(op, public_id)

                now = now_iso()
                txn.aliases.create(
                    public_id,
                    name,
                    primary=not current.aliases,
                    created=now,
                )
                txn.documents.save(public_id, expected_version=current.version, modified=now)
                updated = self._load_document(txn, public_id)
        except IntegrityError as exc:
            return name_conflict(op, name, exc)
        except WriteConflictError as exc:
            return self._write_conflict(op, public_id, exc)
        except InvariantViolationError as exc:
            return self._invariant_failure(op, exc)

        assert updated is not None
        logger.info(
            "alias.added",
            public_id=public_id,
            name=name,
            primary=updated.primary_alias is not None and updated.primary_alias.name == name,
        )
        return self._document_result(op, updated)

    # ------------------------------------------------------------------
    # remove
    # ------------------------------------------------------------------

    def remove_alias(self, document: Document | str, name: str) -> ServiceResult:
        """Remove the alias *name* from *document*.

        A primary alias can only be removed while it is the sole alias.
        No replacement primary is ever chosen automatically.
        """
        op = "remove_alias"
        public_id = public_id_of(document)

        try:
            with self._store.transaction() as txn:
                current = self._load_document(txn, public_id)
                if current is None:
                    return self._document_not_found(op, public_id)

                target = current.find_alias(name)
                if target is None:
                    logger.debug("alias.not_on_document", public_id=public_id, name=name)
                    return failure(
                        op,
                        ErrorCode.NOT_FOUND,
                        f"The alias '{name}' is not used by this note.",
                        name=name,
                        public_id=public_id,
                    )

                # Checked against the state read under the write lock.
                if target.primary and len(current.aliases) > 1:
                    logger.debug("alias.primary_removal_forbidden", public_id=public_id, name=name)
                    return failure(
                        op,
                        ErrorCode.PRIMARY_REMOVAL_FORBIDDEN,
                        (
                            f"The alias '{name}' is the primary alias, "
                            "which can only be removed if it's the only alias."
                        ),
                        name=name,
                        public_id=public_id,
                    )

                txn.aliases.delete(target.id)
                txn.documents.save(
                    public_id, expected_version=current.version, modified=now_iso()
                )
                updated = self._load_document(txn, public_id)
        except WriteConflictError as exc:
            return self._write_conflict(op, public_id, exc)
        except InvariantViolationError as exc:
            return self._invariant_failure(op, exc)

        assert updated is not None
        logger.info("alias.removed", public_id=public_id, name=name)
        return self._document_result(op, updated)

    # ------------------------------------------------------------------
    # promote
    # ------------------------------------------------------------------

    def make_alias_primary(self, document: Document | str, name: str) -> ServiceResult:
        """Make *name* the primary alias of *document*.

        The old primary is cleared and the new one set in one transaction
        guarded by the document's version, so no reader ever sees zero or
        two primaries. Promoting the current primary is a no-op that
        still returns the document. Write conflicts are retried up to
        ``store.max_retries`` times before the operation gives up with
        ``INVARIANT_VIOLATION``.
        """
        op = "make_alias_primary"
        public_id = public_id_of(document)
        attempts = self._settings.store.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                return self._promote(op, public_id, name, attempt=attempt)
            except WriteConflictError as exc:
                logger.warning(
                    "alias.promote_conflict",
                    public_id=public_id,
                    name=name,
                    attempt=attempt,
                    error=str(exc),
                )
            except InvariantViolationError as exc:
                return self._invariant_failure(op, exc)

        logger.error("alias.promote_gave_up", public_id=public_id, name=name, attempts=attempts)
        return failure(
            op,
            ErrorCode.INVARIANT_VIOLATION,
            f"Could not make '{name}' primary after {attempts} conflicting attempts",
            name=name,
            public_id=public_id,
            attempts=attempts,
        )

    def _promote(self, op: str, public_id: str, name: str, *, attempt: int) -> ServiceResult:
        with self._store.transaction() as txn:
            current = self._load_document(txn, public_id)
            if current is None:
                return self._document_not_found(op, public_id)

            target = current.find_alias(name)
            if target is None:
                logger.debug("alias.not_on_document", public_id=public_id, name=name)
                return failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"The alias '{name}' is not used by this note.",
                    name=name,
                    public_id=public_id,
                )

            if target.primary:
                return self._document_result(op, current, attempts=attempt, changed=False)

            old = current.primary_alias
            txn.documents.save(public_id, expected_version=current.version, modified=now_iso())
            if old is not None:
                txn.aliases.save(old.id, primary=False)
            txn.aliases.save(target.id, primary=True)
            updated = self._load_document(txn, public_id)

        assert updated is not None
        logger.info(
            "alias.promoted",
            public_id=public_id,
            name=name,
            previous=old.name if old is not None else None,
        )
        return self._document_result(op, updated, attempts=attempt, changed=True)

    # ------------------------------------------------------------------
    # view
    # ------------------------------------------------------------------

    def to_alias_view(self, name: str, document: Document | str | None = None) -> ServiceResult:
        """Project the alias *name* as ``{name, primary, public_id}``.

        *name* may belong to any document. ``public_id`` is taken from
        *document* when given, otherwise from the alias's owner.
        """
        op = "alias_view"
        with self._store.transaction(write=False) as txn:
            row = txn.aliases.find_by_name(name)

        if row is None:
            logger.debug("alias.not_found", name=name)
            return failure(
                op,
                ErrorCode.NOT_FOUND,
                f"The alias {name} does not exist.",
                name=name,
            )

        view = AliasView(
            name=row["name"],
            primary=row["primary"],
            public_id=public_id_of(document) if document is not None else row["document_id"],
        )
        data = dump_validated(AliasViewData, view.model_dump())
        return ServiceResult(ok=True, op=op, data=data)
