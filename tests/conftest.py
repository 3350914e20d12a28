from __future__ import annotations

from pathlib import Path

import pytest

import htmlwasher.cli as cli_module


def data_path() -> Path:
    """
    :return: Absolute path to test fixtures dir
    """
    return Path(__file__).parent / "fixtures"


def read_text(path: Path) -> str:
    """
    :param path: File path
    :return: File contents as UTF-8 text
    """
    return path.read_text(encoding="utf-8")


@pytest.fixture
def quiet_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Keep the CLI from reconfiguring process-wide logging during tests.
    """
    monkeypatch.setattr(cli_module, "configure_logging", lambda: None)
