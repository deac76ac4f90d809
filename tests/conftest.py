"""Shared pytest fixtures and test helpers for notealias tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from notealias.config.settings import NoteAliasSettings
from notealias.infrastructure.store import Store

FORBIDDEN_NAME = "forbidden-id"


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's NOTEALIAS_* environment out of the tests."""
    monkeypatch.delenv("NOTEALIAS_CONFIG", raising=False)
    monkeypatch.delenv("NOTEALIAS_ALIASES__FORBIDDEN_NAMES", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary workspace with a config that reserves ``forbidden-id``."""
    (tmp_path / "notealias.toml").write_text(
        f'[aliases]\nforbidden_names = ["{FORBIDDEN_NAME}", "new"]\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def settings(workspace_root: Path) -> NoteAliasSettings:
    return NoteAliasSettings.from_cli(workspace_root=workspace_root)


@pytest.fixture
def store(settings: NoteAliasSettings) -> Iterator[Store]:
    """Store backed by a fresh SQLite database in the temp workspace."""
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp workspace so the CLI uses an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_document(store: Store, alias: str | None = None) -> dict[str, Any]:
    """Create a document via CreateService, asserting success."""
    from notealias.services.create import CreateService

    result = CreateService(store).create_document(alias)
    assert result.ok, result.error
    return result.data


def aliases_of(data: dict[str, Any]) -> list[tuple[str, bool]]:
    """``[(name, primary), ...]`` from a document payload."""
    return [(a["name"], a["primary"]) for a in data["aliases"]]
