from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence, Union

try:
    from .config import LayoutConfig
    from .models import Marriage, Position
    from .scene import Line, Path
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from config import LayoutConfig
    from models import Marriage, Position
    from scene import Line, Path

log = logging.getLogger(__name__)


def _elbow(x1: float, y1: float, turn_y: float, x2: float, y2: float) -> Path:
    return Path(
        kind="descent",
        points=((x1, y1), (x1, turn_y), (x2, turn_y), (x2, y2)),
    )


def _marriage_connectors(
    marriages: Iterable[Marriage],
    positions: Mapping[str, Position],
    config: LayoutConfig,
) -> list[Union[Line, Path]]:
    """Marriage lines plus a descent path from each line's midpoint to every placed child.

    Couples whose partners are unplaced or sit in different generations draw
    nothing, including the paths to their children.
    """

    out: list[Union[Line, Path]] = []
    for marriage in marriages:
        p1 = positions.get(marriage.parents[0])
        p2 = positions.get(marriage.parents[1])
        if p1 is None or p2 is None:
            log.debug("marriage %s has an unplaced partner; skipped", marriage.key)
            continue
        if p1.generation != p2.generation:
            log.debug("marriage %s spans generations; skipped", marriage.key)
            continue

        x1 = p1.x + config.node_width
        y1 = p1.y + config.node_height / 2
        x2 = p2.x
        y2 = p2.y + config.node_height / 2
        out.append(Line(kind="marriage", x1=x1, y1=y1, x2=x2, y2=y2))

        mid_x = (x1 + x2) / 2
        turn_y = p1.y + config.node_height + config.connector_drop
        for child_id in marriage.children:
            child = positions.get(child_id)
            if child is None:
                continue
            out.append(_elbow(mid_x, y1, turn_y, child.x + config.node_width / 2, child.y))
    return out


def _single_parent_connectors(
    links: Iterable[tuple[str, str]],
    parents_by_child: Mapping[str, Sequence[str]],
    positions: Mapping[str, Position],
    config: LayoutConfig,
) -> list[Path]:
    """Direct elbows for links whose child is not part of a two-parent marriage."""

    out: list[Path] = []
    for parent_id, child_id in links:
        if len(parents_by_child.get(child_id, ())) == 2:
            continue
        parent = positions.get(parent_id)
        child = positions.get(child_id)
        if parent is None or child is None:
            continue

        x1 = parent.x + config.node_width / 2
        y1 = parent.y + config.node_height
        out.append(_elbow(x1, y1, y1 + config.connector_drop, child.x + config.node_width / 2, child.y))
    return out


def _route_connectors(
    marriages: Iterable[Marriage],
    links: Sequence[tuple[str, str]],
    parents_by_child: Mapping[str, Sequence[str]],
    positions: Mapping[str, Position],
    config: LayoutConfig,
) -> list[Union[Line, Path]]:
    """All connectors, marriages first, in source-collection order."""

    return [
        *_marriage_connectors(marriages, positions, config),
        *_single_parent_connectors(links, parents_by_child, positions, config),
    ]
