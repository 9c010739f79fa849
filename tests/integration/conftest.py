"""Integration test configuration."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

_SRC_DIR = Path(__file__).parent.parent.parent / "src"


@pytest.fixture
def child_env() -> dict[str, str]:
    """Environment for child processes: package importable, no message overrides."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("CLEANEXIT_")}
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = str(_SRC_DIR) if not existing else f"{_SRC_DIR}{os.pathsep}{existing}"
    env["PYTHONUNBUFFERED"] = "1"
    return env
