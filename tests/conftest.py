from __future__ import annotations

import os
import shutil
import socket
from pathlib import Path

import pytest
from hypothesis import settings
from hypothesis.database import DirectoryBasedExampleDatabase

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

_ROOT = Path(__file__).resolve().parents[1]
_FIXTURES = _ROOT / "tests/fixtures"
_HYPOTHESIS_DB = _ROOT / "artifacts/.hypothesis/examples"
_HYPOTHESIS_DB.parent.mkdir(parents=True, exist_ok=True)
settings.register_profile("postlint", database=DirectoryBasedExampleDatabase(_HYPOTHESIS_DB))
settings.load_profile("postlint")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def clean_postlint_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("POSTLINT_") or name in {"CI", "RUN_ID"}:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixtures_root() -> Path:
    return _FIXTURES


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    target = tmp_path / "site" / "content"
    shutil.copytree(_FIXTURES / "content", target)
    return target


@pytest.fixture
def broken_dir(tmp_path: Path) -> Path:
    target = tmp_path / "broken"
    shutil.copytree(_FIXTURES / "broken", target)
    return target
