from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from allfollow.lock.codec import load_lock_path
from allfollow.lock.graph import LockGraph
from tests.lock_helpers import HYPRLAND_LOCK


@pytest.fixture
def hyprland_lock_path(tmp_path: Path) -> Path:
    target = tmp_path / "flake.lock"
    target.write_text(HYPRLAND_LOCK.read_text(encoding="utf-8"), encoding="utf-8")
    return target


@pytest.fixture
def hyprland_lock() -> LockGraph:
    return load_lock_path(HYPRLAND_LOCK)
