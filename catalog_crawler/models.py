"""Records produced by a catalog traversal.

``DetailRecord.to_document`` is the stored schema shared by every sink; its
key names (``class``, ``numOfWeeks``, ``belongsTo`` ...) are what existing
collections and JSON files already contain.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

Number = Union[int, float]

# Marker for a numeric field whose text was present but not a number.
NOT_A_NUMBER: float = float("nan")


def is_not_a_number(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


@dataclass(frozen=True)
class TraversalConfig:
    """The campus and academic year that scope every search of a run.

    Fields stay ``None`` until resolved; resolution returns a new value and
    the resolved value is reused for every reload-and-resume cycle.
    """

    campus_code: Optional[str] = None
    campus: Optional[str] = None
    year_code: Optional[str] = None
    year: Optional[str] = None

    @property
    def campus_resolved(self) -> bool:
        return bool(self.campus_code) and bool(self.campus)

    @property
    def year_resolved(self) -> bool:
        return bool(self.year_code) and bool(self.year)

    @property
    def is_resolved(self) -> bool:
        return self.campus_resolved and self.year_resolved


@dataclass(frozen=True)
class Group:
    """A school; its code filters the search results."""

    code: str
    name: str

    def to_document(self) -> Dict[str, str]:
        return {"code": self.code, "name": self.name}


@dataclass(frozen=True)
class ListingRow:
    index: int
    level: Optional[str]
    code: Optional[str]
    title: Optional[str]
    semester: Optional[str]


@dataclass(frozen=True)
class Convenor:
    name: Optional[str]

    def to_document(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class ClassActivity:
    activity: Optional[str]
    num_of_weeks: Optional[str]
    num_of_sessions: Optional[str]
    session_duration: Optional[str]

    def to_document(self) -> Dict[str, Any]:
        return {
            "activity": self.activity,
            "numOfWeeks": self.num_of_weeks,
            "numOfSessions": self.num_of_sessions,
            "sessionDuration": self.session_duration,
        }


@dataclass(frozen=True)
class Assessment:
    type: Optional[str]
    weight: Optional[str]
    requirements: Optional[str]

    def to_document(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "weight": self.weight,
            "requirements": self.requirements,
        }


@dataclass(frozen=True)
class DetailRecord:
    """One fully extracted course."""

    belongs_to: Group
    code: Optional[str] = None
    title: Optional[str] = None
    credits: Optional[Number] = None
    level: Optional[Number] = None
    summary: Optional[str] = None
    aims: Optional[str] = None
    offering: Optional[str] = None
    semester: Optional[str] = None
    requisites: Optional[str] = None
    outcome: Optional[str] = None
    convenor: Tuple[Convenor, ...] = field(default_factory=tuple)
    classes: Tuple[ClassActivity, ...] = field(default_factory=tuple)
    assessment: Tuple[Assessment, ...] = field(default_factory=tuple)

    def to_document(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "title": self.title,
            "credits": self.credits,
            "level": self.level,
            "summary": self.summary,
            "aims": self.aims,
            "offering": self.offering,
            "convenor": [item.to_document() for item in self.convenor],
            "semester": self.semester,
            "requisites": self.requisites,
            "outcome": self.outcome,
            "class": [item.to_document() for item in self.classes],
            "assessment": [item.to_document() for item in self.assessment],
            "belongsTo": self.belongs_to.to_document(),
        }


__all__ = [
    "NOT_A_NUMBER",
    "is_not_a_number",
    "TraversalConfig",
    "Group",
    "ListingRow",
    "Convenor",
    "ClassActivity",
    "Assessment",
    "DetailRecord",
]
