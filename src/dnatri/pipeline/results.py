"""Filtering, sorting and annotating finished groups.

Operates on the groups returned by ``TriangulationPipeline.run``. Filtering
never rebuilds groups, so ``group_id`` values stay valid for annotation.
"""

import logging
from typing import Literal, Optional, Sequence

from pydantic import Field, model_validator

from dnatri.core.groups import Annotation, TriangulationGroup
from dnatri.schemas.base import DnatriBaseModel

__all__ = ['GroupFilter', 'filter_groups', 'attach_annotation']

logger = logging.getLogger(__name__)


class GroupFilter(DnatriBaseModel):
    """Criteria for narrowing a result list.

    Size bounds apply to a group's total cM; match bounds to its member count.
    ``search_term`` is matched case-insensitively against member names,
    annotation notes, tags and surnames, and suggested common ancestors.
    """
    chromosome: Optional[int] = Field(None, ge=1, le=23)
    min_size: Optional[float] = Field(None, ge=0)
    max_size: Optional[float] = Field(None, ge=0)
    min_matches: Optional[int] = Field(None, ge=0)
    max_matches: Optional[int] = Field(None, ge=0)
    confidence_threshold: Optional[int] = Field(None, ge=0, le=100)
    search_term: Optional[str] = None
    sort_by: Optional[Literal["chromosome", "size", "matches", "confidence", "start"]] = None
    sort_order: Literal["asc", "desc"] = "asc"

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_size is not None and self.max_size is not None and self.min_size > self.max_size:
            raise ValueError(f"min_size ({self.min_size}) exceeds max_size ({self.max_size})")
        if (self.min_matches is not None and self.max_matches is not None
                and self.min_matches > self.max_matches):
            raise ValueError(f"min_matches ({self.min_matches}) exceeds max_matches ({self.max_matches})")
        return self


_SORT_KEYS = {
    "chromosome": lambda g: (g.chromosome, g.start),
    "size": lambda g: g.total_size_cm,
    "matches": lambda g: g.member_count,
    "confidence": lambda g: g.confidence_score,
    "start": lambda g: g.start,
}


def _search_text(group: TriangulationGroup) -> str:
    parts = [m.display_name for m in group.members]
    if group.annotation is not None:
        parts.append(group.annotation.notes or "")
        parts.extend(group.annotation.tags)
        parts.extend(group.annotation.surnames)
    parts.extend(group.common_ancestors)
    return "\n".join(parts).lower()


def _matches(group: TriangulationGroup, f: GroupFilter) -> bool:
    if f.chromosome is not None and group.chromosome != f.chromosome:
        return False
    if f.min_size is not None and group.total_size_cm < f.min_size:
        return False
    if f.max_size is not None and group.total_size_cm > f.max_size:
        return False
    if f.min_matches is not None and group.member_count < f.min_matches:
        return False
    if f.max_matches is not None and group.member_count > f.max_matches:
        return False
    if f.confidence_threshold is not None and group.confidence_score < f.confidence_threshold:
        return False
    if f.search_term:
        term = f.search_term.lower()
        if term not in _search_text(group):
            return False
    return True


def filter_groups(groups: Sequence[TriangulationGroup],
                  group_filter: GroupFilter) -> list[TriangulationGroup]:
    """Return the groups passing ``group_filter``, optionally re-sorted.

    Without ``sort_by`` the input order is kept. Sorting is stable.
    """
    selected = [g for g in groups if _matches(g, group_filter)]
    if group_filter.sort_by is not None:
        selected.sort(key=_SORT_KEYS[group_filter.sort_by],
                      reverse=group_filter.sort_order == "desc")
    logger.debug("Filter kept %d of %d groups", len(selected), len(groups))
    return selected


def attach_annotation(groups: Sequence[TriangulationGroup], group_id: str,
                      annotation: Annotation) -> TriangulationGroup:
    """Attach ``annotation`` to the group with ``group_id``.

    Raises
    ------
    KeyError
        If no group has that id.
    """
    for group in groups:
        if group.group_id == group_id:
            group.annotation = annotation
            return group
    raise KeyError(group_id)
