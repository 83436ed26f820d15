from __future__ import annotations

import logging
from typing import Mapping, Sequence

try:
    from .config import LayoutConfig
    from .errors import StructuralError
    from .models import Person, Position
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from config import LayoutConfig
    from errors import StructuralError
    from models import Person, Position

log = logging.getLogger(__name__)


def _next_generation(
    row: Sequence[str],
    children_by_parent: Mapping[str, Sequence[str]],
    members_by_id: Mapping[str, Person],
) -> list[str]:
    """Unique children of ``row`` in first-seen order, limited to known people."""

    seen: set[str] = set()
    out: list[str] = []
    for parent_id in row:
        for child_id in children_by_parent.get(parent_id, ()):
            if child_id in seen:
                continue
            seen.add(child_id)
            if child_id not in members_by_id:
                log.debug("skipping unknown child id %s of %s", child_id, parent_id)
                continue
            out.append(child_id)
    return out


def _layout_generations(
    root_ids: Sequence[str],
    children_by_parent: Mapping[str, Sequence[str]],
    members_by_id: Mapping[str, Person],
    config: LayoutConfig,
) -> dict[str, Position]:
    """Place people row by row, breadth-first from the roots.

    Every row starts at ``origin_x``; rows are not centered under their parents.
    Someone reached again in a deeper row (parents in different generations) is
    moved there, and the slot they had in the earlier row stays empty.
    """

    positions: dict[str, Position] = {}
    # An acyclic graph cannot have more generations than people.
    max_generations = len(members_by_id)

    row = [rid for rid in root_ids if rid in members_by_id]
    generation = 0
    y = config.origin_y
    while row:
        if generation >= max_generations:
            raise StructuralError(
                f"layout did not terminate after {generation} generations; "
                "parent-child relationships contain a cycle"
            )

        x = config.origin_x
        for pid in row:
            positions[pid] = Position(x=x, y=y, generation=generation)
            x += config.column_step

        row = _next_generation(row, children_by_parent, members_by_id)
        y += config.row_step
        generation += 1

    return positions
