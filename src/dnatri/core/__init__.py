"""Typed data model shared by every pipeline stage."""

from dnatri.core.records import SegmentRecord, IdentityProfile
from dnatri.core.groups import (
    Annotation,
    RelationshipPrediction,
    TreeMatch,
    TriangulationGroup,
    make_group,
)
from dnatri.core.tree import Individual, Relationship, GenealogicalTree

__all__ = [
    "SegmentRecord",
    "IdentityProfile",
    "Annotation",
    "RelationshipPrediction",
    "TreeMatch",
    "TriangulationGroup",
    "make_group",
    "Individual",
    "Relationship",
    "GenealogicalTree",
]
