from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List

import pytest


class FakeRunner:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: List[List[str]] = []

    def __call__(self, command, *args, **kwargs):
        self.calls.append(list(command))
        return subprocess.CompletedProcess(command, self.returncode)


@pytest.fixture
def fake_runner(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr(subprocess, "run", runner)
    return runner


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Working directory laid out the way the suite expects it."""
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "fuzzingclient.json").write_text("{}", encoding="utf-8")
    (tmp_path / "config" / "fuzzingserver.json").write_text("{}", encoding="utf-8")
    (tmp_path / "reports").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path
