from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PARENT_CHILD = "parent-child"

# Characters XML 1.0 cannot carry, even escaped.
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


class Person(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    name: str
    birth_year: Optional[int] = Field(default=None, alias="birthYear")

    @field_validator("id", "name")
    @classmethod
    def _xml_safe(cls, value: str) -> str:
        if _XML_ILLEGAL_RE.search(value):
            raise ValueError("contains characters that cannot appear in XML")
        return value


class Relationship(BaseModel):
    """A typed link between two people. Only ``parent-child`` is understood."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    child_id: Optional[str] = Field(default=None, alias="childId")

    @model_validator(mode="after")
    def _parent_child_needs_both_ids(self) -> "Relationship":
        if self.type == PARENT_CHILD and not (self.parent_id and self.child_id):
            raise ValueError("parent-child relationships need parentId and childId")
        return self

    @property
    def is_parent_child(self) -> bool:
        return self.type == PARENT_CHILD


@dataclass
class Marriage:
    """A couple inferred from a shared child; ``parents`` are sorted."""

    parents: tuple[str, str]
    children: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return "-".join(self.parents)


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    generation: int
