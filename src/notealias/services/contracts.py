"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer, so a renamed key fails fast in tests rather than in a
transport.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class AliasItem(BaseModel):
    """One alias row inside a document payload."""

    name: str
    primary: bool


class DocumentData(BaseModel):
    """Payload contract for every operation that returns a document."""

    public_id: str
    version: int
    primary_alias: str | None
    aliases: list[AliasItem]
    created: str | None = None
    modified: str | None = None


class AliasViewData(BaseModel):
    """Payload contract for ``AliasService.to_alias_view``."""

    name: str
    primary: bool
    public_id: str
