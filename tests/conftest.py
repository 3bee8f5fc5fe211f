from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def write_script(tmp_path: Path):
    """Write a replay script to a temp file and return its path."""

    def _write(content: object, name: str = "moves.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write
