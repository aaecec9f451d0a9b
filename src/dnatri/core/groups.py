"""Triangulation groups and the values attached to them after grouping.

Groups are created by the grouping engine (or by ancestor splitting) through
``make_group``, which fixes membership, span and the stable ``group_id``.
Later stages only attach scores, predictions, tree data and annotations.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional, Sequence

from pydantic import Field

from dnatri.core.records import SegmentRecord
from dnatri.schemas.base import DnatriBaseModel

__all__ = [
    'Annotation',
    'RelationshipPrediction',
    'TreeMatch',
    'TriangulationGroup',
    'make_group',
]


class Annotation(DnatriBaseModel):
    """User-authored research notes attached to a group by ``group_id``."""
    notes: Optional[str] = None
    surnames: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    research_status: Literal["pending", "in-progress", "completed", "verified"] = "pending"
    last_modified: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class RelationshipPrediction:
    relationship: str
    probability: float
    range: str
    confidence: Literal["high", "medium", "low"]
    description: str = ""


@dataclass(frozen=True)
class TreeMatch:
    """Tree individuals whose names or surnames matched one identity."""
    identity: str
    individuals: tuple = ()
    surnames: tuple = ()

    @property
    def is_empty(self) -> bool:
        return not self.individuals


@dataclass
class TriangulationGroup:
    group_id: str
    chromosome: int
    start: int
    end: int
    members: tuple
    total_size_cm: float
    average_size_cm: float
    confidence_score: int = 0
    relationship: Optional[RelationshipPrediction] = None
    tree_matches: list = field(default_factory=list)
    common_ancestors: list = field(default_factory=list)
    ancestor: Optional[str] = None
    annotation: Optional[Annotation] = None

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def primary_ancestor(self) -> str:
        """Ancestor used for ordering: the split label, else the first suggestion."""
        if self.ancestor:
            return self.ancestor
        if self.common_ancestors:
            return self.common_ancestors[0]
        return ""

    @property
    def sort_key(self) -> tuple:
        return (self.primary_ancestor, self.chromosome, self.start)


def _group_id(chromosome: int, start: int, end: int,
              members: Sequence[SegmentRecord], ancestor: Optional[str]) -> str:
    digest = hashlib.sha1()
    digest.update(f"{chromosome}:{start}:{end}:{ancestor or ''}".encode("utf-8"))
    for m in members:
        digest.update(
            f"|{m.canonical_name}:{m.start}:{m.end}:{m.source_file}:{m.row_index}".encode("utf-8")
        )
    return digest.hexdigest()[:12]


def make_group(chromosome: int, members: Sequence[SegmentRecord],
               ancestor: Optional[str] = None) -> Optional[TriangulationGroup]:
    """Build a group over the intersection of its members' spans.

    Returns None when the intersection is empty or inverted.
    """
    members = tuple(members)
    if not members:
        return None
    start = max(m.start for m in members)
    end = min(m.end for m in members)
    if end <= start:
        return None

    total = sum(m.size_cm for m in members)
    return TriangulationGroup(
        group_id=_group_id(chromosome, start, end, members, ancestor),
        chromosome=chromosome,
        start=start,
        end=end,
        members=members,
        total_size_cm=total,
        average_size_cm=total / len(members),
        ancestor=ancestor,
    )
