from __future__ import annotations

from typing import Any
from xml.etree import ElementTree as ET

import pytest
from fastapi import HTTPException
from fastapi.responses import Response

from treesvg.main import health
from treesvg.routes.family_tree import SVG_MEDIA_TYPE, family_tree

_NS = {"svg": "http://www.w3.org/2000/svg"}


def _family() -> dict[str, Any]:
    return {
        "members": [
            {"id": "F", "name": "Frank", "birthYear": 1950},
            {"id": "M", "name": "Maria"},
            {"id": "C", "name": "Chris", "birthYear": 1980},
        ],
        "relationships": [
            {"type": "parent-child", "parentId": "F", "childId": "C"},
            {"type": "parent-child", "parentId": "M", "childId": "C"},
        ],
    }


def _call(payload: dict[str, Any], fmt: str = "svg") -> Any:
    # Called directly, so pass every parameter (FastAPI defaults are Query/Body markers).
    return family_tree(payload=payload, format=fmt)


def test_health() -> None:
    assert health() == {"status": "ok"}


def test_svg_response() -> None:
    resp = _call(_family())

    assert isinstance(resp, Response)
    assert resp.media_type == SVG_MEDIA_TYPE
    root = ET.fromstring(resp.body)
    assert len(root.findall("svg:line", _NS)) == 1
    assert len(root.findall("svg:g", _NS)) == 3


def test_json_scene_response() -> None:
    out = _call(_family(), "json")

    kinds = [c["type"] for c in out["commands"]]
    assert kinds == ["line", "path", "box", "box", "box"]
    assert out["width"] == 380


def test_relationships_default_to_empty() -> None:
    payload = {"members": [{"id": "A", "name": "Ann"}], "relationships": None}
    out = _call(payload, "json")
    assert [c["person_id"] for c in out["commands"]] == ["A"]

    out = _call({"members": [{"id": "A", "name": "Ann"}]}, "json")
    assert len(out["commands"]) == 1


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"members": None},
        {"members": "A,B"},
        {"members": {"id": "A"}},
    ],
)
def test_members_must_be_a_list(payload: dict[str, Any]) -> None:
    with pytest.raises(HTTPException) as exc_info:
        _call(payload)
    assert exc_info.value.status_code == 400
    assert "members array is required" in exc_info.value.detail


def test_relationships_must_be_a_list() -> None:
    with pytest.raises(HTTPException) as exc_info:
        _call({"members": [], "relationships": {"type": "parent-child"}})
    assert exc_info.value.status_code == 400


def test_invalid_member_reports_location() -> None:
    with pytest.raises(HTTPException) as exc_info:
        _call({"members": [{"id": "A", "name": "Ann"}, {"id": "B"}]})
    assert exc_info.value.status_code == 400
    assert "members[1].name" in exc_info.value.detail


def test_parent_child_without_ids_is_rejected() -> None:
    payload = {
        "members": [{"id": "A", "name": "Ann"}],
        "relationships": [{"type": "parent-child", "parentId": "A"}],
    }
    with pytest.raises(HTTPException) as exc_info:
        _call(payload)
    assert exc_info.value.status_code == 400
    assert "relationships[0]" in exc_info.value.detail


def test_duplicate_ids_are_a_client_error() -> None:
    payload = {"members": [{"id": "A", "name": "Ann"}, {"id": "A", "name": "Anne"}]}
    with pytest.raises(HTTPException) as exc_info:
        _call(payload)
    assert exc_info.value.status_code == 400
    assert "duplicate person id" in exc_info.value.detail


def test_cycle_is_unprocessable() -> None:
    payload = {
        "members": [{"id": "A", "name": "Ann"}, {"id": "B", "name": "Bob"}],
        "relationships": [
            {"type": "parent-child", "parentId": "A", "childId": "B"},
            {"type": "parent-child", "parentId": "B", "childId": "A"},
        ],
    }
    with pytest.raises(HTTPException) as exc_info:
        _call(payload)
    assert exc_info.value.status_code == 422
    assert "cycle" in exc_info.value.detail


def test_empty_members_renders_minimal_canvas() -> None:
    resp = _call({"members": []})
    root = ET.fromstring(resp.body)
    assert root.get("width") == "50"
    assert root.get("height") == "50"


def test_layout_env_overrides_apply(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TREESVG_NODE_WIDTH", "100")
    out = _call({"members": [{"id": "A", "name": "Ann"}]}, "json")
    box = out["commands"][0]
    assert box["width"] == 100
    assert out["width"] == 50 + 100 + 50


@pytest.mark.parametrize("payload", [[], "x", 42, None])
def test_non_object_body_is_a_client_error(payload: Any) -> None:
    with pytest.raises(HTTPException) as exc_info:
        _call(payload)
    assert exc_info.value.status_code == 400
    assert "members array is required" in exc_info.value.detail


@pytest.mark.parametrize(
    "member, field",
    [
        ({"id": "A\x0b", "name": "Ann"}, "members[0].id"),
        ({"id": "A", "name": "Ann\x01"}, "members[0].name"),
    ],
)
def test_control_characters_are_rejected(member: dict[str, Any], field: str) -> None:
    with pytest.raises(HTTPException) as exc_info:
        _call({"members": [member]})
    assert exc_info.value.status_code == 400
    assert field in exc_info.value.detail


def test_tabs_and_unicode_names_still_render() -> None:
    resp = _call({"members": [{"id": "A", "name": "Zoë\tvan Dijk"}]})
    root = ET.fromstring(resp.body)
    assert root.find(".//svg:text", _NS).text == "Zoë\tvan Dijk"
