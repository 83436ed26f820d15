"""Layout/render constants and process settings.

Defaults match the original diagram: 120x60 boxes, 40px between boxes,
80px between rows, a 50px margin around the drawing.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping

_ENV_PREFIX = "TREESVG_"
_DEFAULT_PORT = 3000

# Offsets where zero is meaningful (no margin, square corners).
_ZERO_ALLOWED = frozenset({"origin_x", "origin_y", "corner_radius"})


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 120
    node_height: float = 60
    h_gap: float = 40
    v_gap: float = 80
    origin_x: float = 50
    origin_y: float = 50
    canvas_padding: float = 50
    corner_radius: float = 5
    # Label baselines, measured from the top of the box.
    name_offset: float = 25
    detail_offset: float = 42

    @property
    def column_step(self) -> float:
        return self.node_width + self.h_gap

    @property
    def row_step(self) -> float:
        return self.node_height + self.v_gap

    @property
    def connector_drop(self) -> float:
        """Distance below a row where descent connectors turn horizontal."""
        return self.v_gap / 2


def _parse_number(name: str, raw: str, *, allow_zero: bool = False) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise RuntimeError(f"{name} must be a finite number, got {raw!r}")
    if value < 0 or (value == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise RuntimeError(f"{name} must be {qualifier}, got {raw!r}")
    return int(value) if value.is_integer() else value


def load_layout_config(environ: Mapping[str, str] | None = None) -> LayoutConfig:
    """Build a LayoutConfig, overriding defaults from ``TREESVG_<FIELD>`` variables."""

    env = os.environ if environ is None else environ
    overrides: dict[str, float] = {}
    for f in fields(LayoutConfig):
        name = _ENV_PREFIX + f.name.upper()
        raw = (env.get(name) or "").strip()
        if not raw:
            continue
        overrides[f.name] = _parse_number(name, raw, allow_zero=f.name in _ZERO_ALLOWED)
    return replace(LayoutConfig(), **overrides)


def get_port(environ: Mapping[str, str] | None = None) -> int:
    env = os.environ if environ is None else environ
    raw = (env.get("PORT") or "").strip()
    if not raw:
        return _DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"PORT must be an integer, got {raw!r}") from None


def get_log_level(environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get("LOG_LEVEL") or "info").strip().lower()
