"""CreateService — new documents with a fresh public ID.

Pipeline: VALIDATE → GENERATE → PERSIST → RESPOND

An optional initial alias goes through the same checks as
``AliasService.add_alias`` and becomes the primary alias, in the same
transaction that inserts the document.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError

from notealias.domain.ids import generate_public_id
from notealias.domain.models import InvariantViolationError
from notealias.infrastructure.repositories.documents import WriteConflictError
from notealias.services._helpers import now_iso
from notealias.services.alias import check_new_alias, name_conflict
from notealias.services.base import BaseService
from notealias.services.result import ServiceResult

if TYPE_CHECKING:
    from notealias.infrastructure.store import Store

logger = structlog.get_logger(__name__)

# Regeneration bound for the (practically impossible) case of a 128-bit
# identifier colliding with an existing name.
_MAX_ID_ATTEMPTS = 5


class CreateService(BaseService):
    """Creates documents."""

    def __init__(
        self,
        store: Store,
        *,
        id_factory: Callable[[], str] = generate_public_id,
    ) -> None:
        super().__init__(store)
        self._id_factory = id_factory

    def create_document(self, alias: str | None = None) -> ServiceResult:
        """Create a document, optionally with an initial primary *alias*."""
        op = "create_document"

        try:
            with self._store.transaction() as txn:
                # ── VALIDATE ─────────────────────────────────────
                if alias is not None:
                    rejected = check_new_alias(
                        txn, op, alias, self._settings.aliases.forbidden_names
                    )
                    if rejected is not None:
                        return rejected

                # ── GENERATE ─────────────────────────────────────
                public_id = self._id_factory()
                for _ in range(_MAX_ID_ATTEMPTS - 1):
                    if txn.documents.name_taken(public_id) is None:
                        break
                    logger.warning("document.public_id_collision", public_id=public_id)
                    public_id = self._id_factory()

                # ── PERSIST ──────────────────────────────────────
                now = now_iso()
                txn.documents.create(public_id, created=now)
                if alias is not None:
                    txn.aliases.create(public_id, alias, primary=True, created=now)
                document = self._load_document(txn, public_id)
        except IntegrityError as exc:
            if alias is None:
                raise
            return name_conflict(op, alias, exc)
        except WriteConflictError as exc:
            return self._write_conflict(op, None, exc)
        except InvariantViolationError as exc:
            return self._invariant_failure(op, exc)

        # ── RESPOND ──────────────────────────────────────────────
        assert document is not None
        logger.info("document.created", public_id=public_id, alias=alias)
        return self._document_result(op, document)
