from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Sequence

try:
    from .errors import InputShapeError
    from .models import Marriage, Person, Relationship
except ImportError:  # pragma: no cover
    # Support running with CWD=treesvg (e.g., `python -m uvicorn main:app`).
    from errors import InputShapeError
    from models import Marriage, Person, Relationship


def _parent_child_links(relationships: Iterable[Relationship]) -> list[tuple[str, str]]:
    """Return unique (parent_id, child_id) pairs in input order.

    Relationship types other than parent-child are dropped.
    """

    out: dict[tuple[str, str], None] = {}
    for rel in relationships:
        if not rel.is_parent_child:
            continue
        out[(str(rel.parent_id), str(rel.child_id))] = None
    return list(out)


def _member_index(members: Sequence[Person]) -> dict[str, Person]:
    out: dict[str, Person] = {}
    for m in members:
        if m.id in out:
            raise InputShapeError(f"duplicate person id: {m.id}")
        out[m.id] = m
    return out


def _parents_by_child(links: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """Return child -> recorded parent ids, in first-seen order.

    Repeating the same parent-child link does not count as a second parent.
    """

    out: dict[str, list[str]] = {}
    for parent_id, child_id in links:
        parents = out.setdefault(child_id, [])
        if parent_id not in parents:
            parents.append(parent_id)
    return out


def _children_by_parent(links: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for parent_id, child_id in links:
        children = out.setdefault(parent_id, [])
        if child_id not in children:
            children.append(child_id)
    return out


def _infer_marriages(parents_by_child: Mapping[str, Sequence[str]]) -> dict[tuple[str, str], Marriage]:
    """Group children under the couple that jointly parents them.

    Takes the output of ``_parents_by_child``. Only children with exactly two
    recorded parents form a marriage. The dict is keyed by the sorted
    parent pair, so [A, B] and [B, A] land on one record.
    """

    marriages: dict[tuple[str, str], Marriage] = {}
    for child_id, parents in parents_by_child.items():
        if len(parents) != 2:
            continue
        a, b = sorted(parents)
        marriage = marriages.get((a, b))
        if marriage is None:
            marriage = marriages[(a, b)] = Marriage(parents=(a, b))
        marriage.children.append(child_id)
    return marriages


def _find_roots(members: Sequence[Person], links: Iterable[tuple[str, str]]) -> list[Person]:
    """People never listed as a child, in input order. They seed generation 0."""

    child_ids = {child_id for _parent_id, child_id in links}
    return [m for m in members if m.id not in child_ids]


def _find_cycle(links: Iterable[tuple[str, str]]) -> list[str] | None:
    """Return one parent-child cycle as [a, b, ..., a], or None if the graph is acyclic.

    Iterative DFS; ``done`` holds fully explored nodes, ``on_path`` the current chain.
    """

    children = _children_by_parent(links)
    done: set[str] = set()

    for start in children:
        if start in done:
            continue

        path: list[str] = [start]
        on_path: set[str] = {start}
        stack: list[Iterator[str]] = [iter(children.get(start, []))]

        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                node = path.pop()
                on_path.discard(node)
                done.add(node)
                continue
            if nxt in on_path:
                return path[path.index(nxt):] + [nxt]
            if nxt in done:
                continue
            path.append(nxt)
            on_path.add(nxt)
            stack.append(iter(children.get(nxt, [])))

    return None
