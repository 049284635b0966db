"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from guardscan.config import GuardConfig

CLEAN_PY = "def add(a, b):\n    return a + b\n"
CLEAN_JS = "function sub(a, b) {\n  return a - b;\n}\n"
VULNERABLE_JS = "const r = eval(userInput);\n"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch) -> None:
    """Keep the user's real settings and env overrides out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    for name in (
        "GUARDSCAN_MAX_FILE_SIZE",
        "GUARDSCAN_CACHE_SIZE",
        "GUARDSCAN_AUTO_ANALYSIS",
        "GUARDSCAN_ANALYSIS_ON_SAVE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_config(tmp_path: Path) -> GuardConfig:
    return GuardConfig(config_dir=tmp_path / "config", file_delay=0.0)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Three source files, only one of which has findings."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "clean.py").write_text(CLEAN_PY)
    (root / "src").mkdir()
    (root / "src" / "clean.js").write_text(CLEAN_JS)
    (root / "src" / "vuln.js").write_text(VULNERABLE_JS)
    return root
