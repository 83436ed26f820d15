from __future__ import annotations


class TreeLayoutError(Exception):
    """Base class for errors raised while laying out a family tree."""


class InputShapeError(TreeLayoutError, ValueError):
    """The input cannot be laid out as given (e.g. duplicate person ids)."""


class StructuralError(TreeLayoutError):
    """The parent-child graph is not a forest (a person is their own ancestor)."""

    def __init__(self, message: str, *, cycle: list[str] | None = None) -> None:
        super().__init__(message)
        self.cycle = list(cycle or [])
