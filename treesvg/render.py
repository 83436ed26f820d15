"""Scene assembly and serializers.

``_build_scene`` fixes the draw order: connectors (marriages first), then one
box per placed person in input order. Serializers only translate commands.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence, Union
from xml.etree import ElementTree as ET

try:
    from .config import LayoutConfig
    from .models import Person, Position
    from .scene import Box, Line, Path, Scene, _num
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from config import LayoutConfig
    from models import Person, Position
    from scene import Box, Line, Path, Scene, _num

_SVG_NS = "http://www.w3.org/2000/svg"

_STYLE_CSS = """
      .person-box { fill: #e3f2fd; stroke: #1976d2; stroke-width: 2; }
      .person-name { font-family: Arial, sans-serif; font-size: 14px; fill: #000; text-anchor: middle; }
      .person-details { font-family: Arial, sans-serif; font-size: 11px; fill: #555; text-anchor: middle; }
      .relationship-line { stroke: #666; stroke-width: 2; fill: none; }
      .marriage-line { stroke: #1976d2; stroke-width: 2; fill: none; }
    """

_LINE_CLASS = {
    "marriage": "marriage-line",
    "descent": "relationship-line",
}


def _birth_label(person: Person) -> str | None:
    if person.birth_year is None:
        return None
    return f"b. {person.birth_year}"


def _canvas_size(positions: Iterable[Position], config: LayoutConfig) -> tuple[float, float]:
    max_x: float = 0
    max_y: float = 0
    for pos in positions:
        max_x = max(max_x, pos.x + config.node_width)
        max_y = max(max_y, pos.y + config.node_height)
    return max_x + config.canvas_padding, max_y + config.canvas_padding


def _build_scene(
    members: Sequence[Person],
    positions: Mapping[str, Position],
    connectors: Iterable[Union[Line, Path]],
    config: LayoutConfig,
) -> Scene:
    width, height = _canvas_size(positions.values(), config)
    scene = Scene(width=width, height=height)
    scene.commands.extend(connectors)

    for person in members:
        pos = positions.get(person.id)
        if pos is None:
            continue
        detail = _birth_label(person)
        scene.commands.append(
            Box(
                person_id=person.id,
                x=pos.x,
                y=pos.y,
                width=config.node_width,
                height=config.node_height,
                label=person.name,
                label_y=pos.y + config.name_offset,
                detail=detail,
                detail_y=pos.y + config.detail_offset if detail is not None else None,
                corner_radius=config.corner_radius,
            )
        )
    return scene


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------


def _svg_box(parent: ET.Element, box: Box) -> None:
    g = ET.SubElement(parent, "g", {"data-person-id": box.person_id})
    ET.SubElement(
        g,
        "rect",
        {
            "class": "person-box",
            "x": _num(box.x),
            "y": _num(box.y),
            "width": _num(box.width),
            "height": _num(box.height),
            "rx": _num(box.corner_radius),
        },
    )
    center_x = _num(box.x + box.width / 2)
    name = ET.SubElement(
        g,
        "text",
        {"class": "person-name", "x": center_x, "y": _num(box.label_y)},
    )
    name.text = box.label
    if box.detail is not None and box.detail_y is not None:
        detail = ET.SubElement(
            g,
            "text",
            {"class": "person-details", "x": center_x, "y": _num(box.detail_y)},
        )
        detail.text = box.detail


def _scene_to_svg(scene: Scene) -> str:
    """Serialize a scene as a standalone SVG document."""

    width, height = _num(scene.width), _num(scene.height)
    svg = ET.Element(
        "svg",
        {
            "xmlns": _SVG_NS,
            "width": width,
            "height": height,
            "viewBox": f"0 0 {width} {height}",
        },
    )
    defs = ET.SubElement(svg, "defs")
    style = ET.SubElement(defs, "style")
    style.text = _STYLE_CSS

    for cmd in scene.commands:
        if isinstance(cmd, Line):
            ET.SubElement(
                svg,
                "line",
                {
                    "class": _LINE_CLASS[cmd.kind],
                    "x1": _num(cmd.x1),
                    "y1": _num(cmd.y1),
                    "x2": _num(cmd.x2),
                    "y2": _num(cmd.y2),
                },
            )
        elif isinstance(cmd, Path):
            ET.SubElement(svg, "path", {"class": _LINE_CLASS[cmd.kind], "d": cmd.d})
        else:
            _svg_box(svg, cmd)

    ET.indent(svg, space="  ")
    body = ET.tostring(svg, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _scene_to_json(scene: Scene) -> dict[str, Any]:
    """Plain-dict scene for clients that do their own drawing."""

    commands: list[dict[str, Any]] = []
    for cmd in scene.commands:
        if isinstance(cmd, Line):
            commands.append(
                {"type": "line", "kind": cmd.kind, "x1": cmd.x1, "y1": cmd.y1, "x2": cmd.x2, "y2": cmd.y2}
            )
        elif isinstance(cmd, Path):
            commands.append({"type": "path", "kind": cmd.kind, "points": [list(p) for p in cmd.points]})
        else:
            commands.append(
                {
                    "type": "box",
                    "person_id": cmd.person_id,
                    "x": cmd.x,
                    "y": cmd.y,
                    "width": cmd.width,
                    "height": cmd.height,
                    "label": cmd.label,
                    "label_y": cmd.label_y,
                    "detail": cmd.detail,
                    "detail_y": cmd.detail_y,
                    "corner_radius": cmd.corner_radius,
                }
            )
    return {"width": scene.width, "height": scene.height, "commands": commands}


SERIALIZERS: dict[str, Callable[[Scene], Any]] = {
    "svg": _scene_to_svg,
    "json": _scene_to_json,
}
