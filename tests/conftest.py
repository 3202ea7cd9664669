"""Shared pytest fixtures and test helpers for tasktrack tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from tasktrack.infrastructure.storage import MemoryStorage, StorageReadError, StorageWriteError
from tasktrack.services.model import StateModel
from tasktrack.services.persistence import PersistenceGateway


class FakeClock:
    """Millisecond clock that advances by *step* on every call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


class FailingStorage(MemoryStorage):
    """Storage whose reads and/or writes always fail."""

    def __init__(self, *, fail_read: bool = False, fail_write: bool = False) -> None:
        super().__init__()
        self.fail_read = fail_read
        self.fail_write = fail_write

    def get(self, key: str) -> bytes | None:
        if self.fail_read:
            raise StorageReadError("disk unavailable")
        return super().get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.fail_write:
            raise StorageWriteError("quota exceeded")
        super().set(key, value)


@pytest.fixture(autouse=True)
def _restore_logging_state() -> Generator[None]:
    """Undo the root handler swap done by configure_logging in CLI tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    app = logging.getLogger("tasktrack")
    app_level = app.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    app.setLevel(app_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def gateway(storage: MemoryStorage) -> PersistenceGateway:
    return PersistenceGateway(storage)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def model(gateway: PersistenceGateway, clock: FakeClock) -> StateModel:
    """A StateModel over empty in-memory storage with a deterministic clock."""
    return StateModel(gateway, clock=clock)


@pytest.fixture
def _isolated_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path]:
    """Change CWD to a temp data root so the CLI writes an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_data")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TASKTRACK_CONFIG", raising=False)
    monkeypatch.delenv("TASKTRACK_DATA_ROOT", raising=False)
    yield tmp_path


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def add_category(model: StateModel, name: str) -> str:
    """Create a category, asserting success. Returns its id."""
    result = model.add_category(name)
    assert result.ok, result.error
    return str(result.data["id"])


def add_task(model: StateModel, category_id: str, title: str) -> str:
    """Create a task, asserting success. Returns its id."""
    result = model.add_task(category_id, title)
    assert result.ok, result.error
    return str(result.data["id"])


def invoke_json(cli_runner: CliRunner, *args: str) -> dict[str, Any]:
    """Run ``tasktrack --json ARGS``, asserting success. Returns the payload."""
    from tasktrack.cli import cli

    result = cli_runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    payload: dict[str, Any] = json.loads(result.stdout)
    return payload
