"""Routes for rendering a family tree.

Endpoints:
  POST /api/family-tree — lay out members + relationships, return SVG (or a JSON scene)
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, ValidationError

try:
    from ..config import load_layout_config
    from ..core import layout_family_tree
    from ..errors import InputShapeError, StructuralError
    from ..models import Person, Relationship
    from ..render import SERIALIZERS
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from config import load_layout_config
    from core import layout_family_tree
    from errors import InputShapeError, StructuralError
    from models import Person, Relationship
    from render import SERIALIZERS

log = logging.getLogger(__name__)

router = APIRouter(tags=["family-tree"])

SVG_MEDIA_TYPE = "image/svg+xml"


def _parse_items(raw: list[Any], model: type[BaseModel], what: str) -> list[Any]:
    out = []
    for i, item in enumerate(raw):
        try:
            out.append(model.model_validate(item))
        except ValidationError as e:
            first = e.errors()[0]
            loc = ".".join(str(p) for p in first.get("loc", ()))
            where = f"{what}[{i}]" + (f".{loc}" if loc else "")
            raise HTTPException(status_code=400, detail=f"Invalid input: {where}: {first['msg']}") from None
    return out


def _parse_payload(payload: Any) -> tuple[list[Person], list[Relationship]]:
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid input: members array is required")

    members_raw = payload.get("members")
    if not isinstance(members_raw, list):
        raise HTTPException(status_code=400, detail="Invalid input: members array is required")

    relationships_raw = payload.get("relationships")
    if relationships_raw is None:
        relationships_raw = []
    if not isinstance(relationships_raw, list):
        raise HTTPException(status_code=400, detail="Invalid input: relationships must be an array")

    return (
        _parse_items(members_raw, Person, "members"),
        _parse_items(relationships_raw, Relationship, "relationships"),
    )


@router.post("/api/family-tree")
def family_tree(
    payload: Any = Body(default_factory=dict),
    format: Literal["svg", "json"] = Query(default="svg"),
) -> Any:
    """Render a family as an SVG diagram.

    Body: ``{"members": [{"id", "name", "birthYear"?}], "relationships": [...]}``.
    ``format=json`` returns the laid-out draw commands instead of SVG markup.
    """

    members, relationships = _parse_payload(payload)

    try:
        scene = layout_family_tree(members, relationships, config=load_layout_config())
    except InputShapeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid input: {e}") from None
    except StructuralError as e:
        log.warning("rejecting family tree: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from None
    except Exception:
        log.exception("error generating family tree")
        raise

    body = SERIALIZERS[format](scene)
    if format == "json":
        return body
    return Response(content=body, media_type=SVG_MEDIA_TYPE)
