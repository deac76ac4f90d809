"""Document and alias models with the single-primary invariant.

Alias lifecycle over a document's ``aliases`` collection:

- NO_ALIAS: no aliases; the public ID alone identifies the document.
- SINGLE_PRIMARY: exactly one alias, and it is primary.
- MULTI_ALIAS: two or more aliases, exactly one of them primary.

Only add, remove, and promote move a document between these states.
Aliases reference their document by public ID, never by object.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class AliasState(StrEnum):
    """Per-document alias lifecycle state."""

    NO_ALIAS = "no_alias"
    SINGLE_PRIMARY = "single_primary"
    MULTI_ALIAS = "multi_alias"


class InvariantViolationError(Exception):
    """A stored document broke the single-primary or ownership invariant."""

    def __init__(self, public_id: str, problems: list[str]) -> None:
        self.public_id = public_id
        self.problems = problems
        super().__init__(f"Document {public_id} is inconsistent: {'; '.join(problems)}")


class Alias(BaseModel):
    """A human-chosen name that also resolves to its document."""

    model_config = {"frozen": True}

    id: int
    name: str
    primary: bool = False
    document_id: str
    created: str | None = None


class AliasView(BaseModel):
    """Read-only projection of one alias."""

    model_config = {"frozen": True}

    name: str
    primary: bool
    public_id: str


class Document(BaseModel):
    """A document's identity: its public ID plus its aliases in insertion order."""

    model_config = {"frozen": True}

    public_id: str
    aliases: list[Alias] = Field(default_factory=list)
    version: int = 1
    created: str | None = None
    modified: str | None = None

    @property
    def primary_alias(self) -> Alias | None:
        """The primary alias, or None when the document has no aliases."""
        for alias in self.aliases:
            if alias.primary:
                return alias
        return None

    @property
    def alias_names(self) -> list[str]:
        return [alias.name for alias in self.aliases]

    @property
    def state(self) -> AliasState:
        if not self.aliases:
            return AliasState.NO_ALIAS
        if len(self.aliases) == 1:
            return AliasState.SINGLE_PRIMARY
        return AliasState.MULTI_ALIAS

    def find_alias(self, name: str) -> Alias | None:
        """Return this document's alias called *name*, if any."""
        for alias in self.aliases:
            if alias.name == name:
                return alias
        return None

    def invariant_problems(self) -> list[str]:
        """List every way this document breaks the alias invariants.

        An empty list means the document is consistent.
        """
        problems: list[str] = []
        primaries = sum(1 for alias in self.aliases if alias.primary)
        if self.aliases and primaries != 1:
            problems.append(f"expected exactly one primary alias, found {primaries}")

        names = self.alias_names
        if len(set(names)) != len(names):
            problems.append("duplicate alias names")
        if self.public_id in names:
            problems.append("an alias equals the document's public ID")

        foreign = [a.name for a in self.aliases if a.document_id != self.public_id]
        if foreign:
            problems.append(f"aliases owned by another document: {foreign}")
        return problems

    def check_invariants(self) -> None:
        """Raise :class:`InvariantViolationError` if the document is inconsistent."""
        problems = self.invariant_problems()
        if problems:
            raise InvariantViolationError(self.public_id, problems)
