from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# Ensure the repo root (containing `htmlfy/`) is importable when pytest
# picks `tests/` as the rootdir (e.g., single-file runs).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "HTMLFY_CONFIG",
        "HTMLFY_MAX_INPUT_CHARS",
        "HTMLFY_LOG_LEVEL",
        "HTMLFY_LOG_DIR",
        "HTMLFY_DISABLE_FILE_LOG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def detach_file_logs():
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, "_htmlfy_file_log", False):
            root.removeHandler(h)
            h.close()
