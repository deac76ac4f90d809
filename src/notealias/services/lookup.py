"""LookupService — resolve a document by public ID or by any alias.

Public IDs and alias names share one uniqueness index, so at most one
document can match a given string. Public IDs are tried first.
"""

from __future__ import annotations

import structlog

from notealias.domain.models import Document, InvariantViolationError
from notealias.services.base import BaseService
from notealias.services.result import ErrorCode, ServiceResult, failure

logger = structlog.get_logger(__name__)


class LookupService(BaseService):
    """Read-only document resolution."""

    def find(self, id_or_alias: str) -> Document | None:
        """Return the matching document, or None.

        Raises:
            InvariantViolationError: The stored document is inconsistent.
        """
        with self._store.transaction(write=False) as txn:
            document = self._load_document(txn, id_or_alias)
            if document is not None:
                return document
            return self._build_document(txn.documents.find_by_alias(id_or_alias))

    def resolve(self, id_or_alias: str) -> ServiceResult:
        """Resolve *id_or_alias* to its document."""
        op = "resolve"
        try:
            document = self.find(id_or_alias)
        except InvariantViolationError as exc:
            return self._invariant_failure(op, exc)

        if document is None:
            logger.debug("document.not_found", id_or_alias=id_or_alias)
            return failure(
                op,
                ErrorCode.NOT_FOUND,
                f"No note found with id or alias: {id_or_alias}",
                id_or_alias=id_or_alias,
            )
        return self._document_result(op, document)
