"""Shared fixtures: temporary source trees and a clean configuration."""
from pathlib import Path
from typing import Callable, Dict

import pytest

from flowtrace.config import reset_config


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch):
    """Keep FLOWTRACE_* settings from leaking between tests."""
    for name in ("FLOWTRACE_POLICY", "FLOWTRACE_SEEDS", "FLOWTRACE_WORKERS", "FLOWTRACE_EXCLUDE_DIRS"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_tree(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """Write {relative path: source} into a fresh root and return the root."""

    def _make(files: Dict[str, str]) -> Path:
        root = tmp_path / "project"
        for relative, content in files.items():
            file_path = root / relative
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        root.mkdir(exist_ok=True)
        return root

    return _make
