from __future__ import annotations

import os

import pytest

from treesvg.config import LayoutConfig


@pytest.fixture()
def config() -> LayoutConfig:
    # Original box geometry: 120x60 boxes, 40px gaps, 80px between rows.
    return LayoutConfig()


@pytest.fixture(autouse=True)
def _clean_layout_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Route handlers read TREESVG_* overrides; keep tests on the defaults.
    for key in list(os.environ):
        if key.startswith("TREESVG_"):
            monkeypatch.delenv(key, raising=False)
