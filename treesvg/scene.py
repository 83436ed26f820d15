"""Format-independent draw commands.

Layout code produces a Scene; serializers in ``render`` turn it into SVG or JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

LineKind = Literal["marriage", "descent"]


@dataclass(frozen=True)
class Line:
    kind: LineKind
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class Path:
    """A polyline through ``points``; descent connectors are vertical-horizontal-vertical."""

    kind: LineKind
    points: tuple[tuple[float, float], ...]

    @property
    def d(self) -> str:
        parts = []
        for i, (x, y) in enumerate(self.points):
            parts.append(f"{'M' if i == 0 else 'L'} {_num(x)} {_num(y)}")
        return " ".join(parts)


@dataclass(frozen=True)
class Box:
    person_id: str
    x: float
    y: float
    width: float
    height: float
    label: str
    label_y: float
    detail: Optional[str] = None
    detail_y: Optional[float] = None
    corner_radius: float = 0


Command = Union[Line, Path, Box]


@dataclass
class Scene:
    width: float
    height: float
    commands: list[Command] = field(default_factory=list)

    @property
    def boxes(self) -> list[Box]:
        return [c for c in self.commands if isinstance(c, Box)]

    @property
    def connectors(self) -> list[Union[Line, Path]]:
        return [c for c in self.commands if not isinstance(c, Box)]


def _num(value: float) -> str:
    """Render a coordinate without a trailing ``.0`` for whole numbers."""

    v = float(value)
    if v.is_integer():
        return str(int(v))
    return f"{v:.2f}".rstrip("0").rstrip(".")
