"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here, notealias.toml only holds overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

# Route names a document alias may never shadow.
DEFAULT_FORBIDDEN_NAMES: tuple[str, ...] = (
    "api",
    "auth",
    "explore",
    "history",
    "login",
    "logout",
    "media",
    "n",
    "new",
    "p",
    "profile",
    "register",
    "s",
    "settings",
)


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    filename: str = "notealias.db"
    busy_timeout: float = 5.0
    max_retries: int = Field(default=3, ge=0)


class AliasesConfig(BaseModel):
    """[aliases] section."""

    model_config = {"frozen": True}

    forbidden_names: frozenset[str] = Field(
        default_factory=lambda: frozenset(DEFAULT_FORBIDDEN_NAMES)
    )

    @field_validator("forbidden_names", mode="before")
    @classmethod
    def _coerce_names(cls, value: object) -> object:
        if isinstance(value, str):
            return frozenset({value})
        return value
