"""Shared helpers for building throwaway source trees."""

from __future__ import annotations

from pathlib import Path

import pytest


def populate(base: Path, structure: dict) -> None:
    """Create files under *base*.

    Keys are file/dir names; values are file contents (``str`` or
    ``bytes``) or nested dicts for directories.
    """
    for name, content in structure.items():
        path = base / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            populate(path, content)
        elif isinstance(content, bytes):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


@pytest.fixture
def make_repo(tmp_path: Path):
    def _make(structure: dict) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        populate(root, structure)
        return root

    return _make
