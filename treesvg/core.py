"""Family tree layout entry points.

Pipeline: member index -> marriages / roots / cycle check -> generation rows
-> connectors -> scene -> serializer. Every call builds fresh state.
"""

from __future__ import annotations

import logging
from typing import Sequence

try:
    from .config import LayoutConfig
    from .connectors import _route_connectors
    from .errors import StructuralError
    from .graph import (
        _children_by_parent,
        _find_cycle,
        _find_roots,
        _infer_marriages,
        _member_index,
        _parent_child_links,
        _parents_by_child,
    )
    from .layout import _layout_generations
    from .models import Person, Relationship
    from .render import _build_scene, _scene_to_svg
    from .scene import Scene
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from config import LayoutConfig
    from connectors import _route_connectors
    from errors import StructuralError
    from graph import (
        _children_by_parent,
        _find_cycle,
        _find_roots,
        _infer_marriages,
        _member_index,
        _parent_child_links,
        _parents_by_child,
    )
    from layout import _layout_generations
    from models import Person, Relationship
    from render import _build_scene, _scene_to_svg
    from scene import Scene

log = logging.getLogger(__name__)


def layout_family_tree(
    members: Sequence[Person],
    relationships: Sequence[Relationship] = (),
    *,
    config: LayoutConfig | None = None,
) -> Scene:
    """Lay out a family and return the ordered draw commands.

    Raises InputShapeError for duplicate person ids and StructuralError when the
    parent-child links contain a cycle. Links to unknown people and people that
    cannot be reached from a root are dropped silently.
    """

    cfg = config or LayoutConfig()
    members_by_id = _member_index(members)
    links = _parent_child_links(relationships)

    cycle = _find_cycle(links)
    if cycle:
        raise StructuralError(
            "parent-child relationships contain a cycle: " + " -> ".join(cycle),
            cycle=cycle,
        )

    parents_by_child = _parents_by_child(links)
    roots = _find_roots(members, links)
    positions = _layout_generations(
        [r.id for r in roots],
        _children_by_parent(links),
        members_by_id,
        cfg,
    )

    connectors = _route_connectors(
        _infer_marriages(parents_by_child).values(),
        links,
        parents_by_child,
        positions,
        cfg,
    )
    scene = _build_scene(members, positions, connectors, cfg)

    log.info(
        "laid out family tree: members=%d links=%d roots=%d placed=%d",
        len(members),
        len(links),
        len(roots),
        len(positions),
    )
    return scene


def layout_and_render(
    members: Sequence[Person],
    relationships: Sequence[Relationship] = (),
    *,
    config: LayoutConfig | None = None,
) -> str:
    """Lay out a family and return it as an SVG document."""

    return _scene_to_svg(layout_family_tree(members, relationships, config=config))
