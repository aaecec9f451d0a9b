"""Confidence scoring and relationship prediction for triangulation groups.

Confidence combines four factors, each normalized to [0, 1]:

1. **Size**: average member size, saturating at ``size_cm_full`` (20 cM)
2. **Overlap**: mean pairwise overlap percentage between members / 100
3. **Match count**: member count, saturating at ``match_count_full`` (10)
4. **Total cM**: summed member size, saturating at ``total_cm_full`` (1000 cM)

The weighted sum (0.3 / 0.2 / 0.3 / 0.2 by default) is rounded half up to an
integer percentage and clamped to [0, 100].

Relationship prediction uses a fixed table of shared-cM bands derived from
the Shared cM Project. Among all bands whose range contains the total, the
band with the highest prior probability wins, even when a higher-cM band
also contains the value.
"""

import logging
import math
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence, TYPE_CHECKING

from dnatri.core.groups import RelationshipPrediction, TriangulationGroup
from dnatri.core.records import SegmentRecord
from dnatri.dna.grouping import overlap_ratio

if TYPE_CHECKING:
    from dnatri.schemas import InternalConfig

__all__ = [
    'RelationshipBand',
    'RELATIONSHIP_BANDS',
    'average_pairwise_overlap',
    'ConfidenceScorer',
    'RelationshipPredictor',
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationshipBand:
    name: str
    min_cm: float
    max_cm: float
    probability: float
    description: str

    def contains(self, total_cm: float) -> bool:
        return self.min_cm <= total_cm <= self.max_cm

    @property
    def range_label(self) -> str:
        return f"{self.min_cm:g}-{self.max_cm:g} cM"


# Order matters: it breaks probability ties and supplies the fallback band.
RELATIONSHIP_BANDS = (
    RelationshipBand("Parent/Child", 3400, 3720, 0.99, "Direct parent-child relationship"),
    RelationshipBand("Full Sibling", 2200, 3400, 0.95, "Full siblings sharing both parents"),
    RelationshipBand("Half Sibling", 1300, 2300, 0.85, "Half siblings sharing one parent"),
    RelationshipBand("Grandparent/Grandchild", 1200, 2300, 0.90, "Grandparent-grandchild relationship"),
    RelationshipBand("Aunt/Uncle/Niece/Nephew", 1200, 2300, 0.80, "Aunt/uncle to niece/nephew"),
    RelationshipBand("1st Cousin", 550, 1300, 0.75, "First cousins"),
    RelationshipBand("1st Cousin Once Removed", 400, 1000, 0.70, "First cousin once removed"),
    RelationshipBand("2nd Cousin", 200, 600, 0.65, "Second cousins"),
    RelationshipBand("2nd Cousin Once Removed", 150, 500, 0.60, "Second cousin once removed"),
    RelationshipBand("3rd Cousin", 75, 200, 0.55, "Third cousins"),
    RelationshipBand("3rd Cousin Once Removed", 50, 150, 0.50, "Third cousin once removed"),
    RelationshipBand("4th Cousin", 20, 100, 0.45, "Fourth cousins"),
    RelationshipBand("5th Cousin", 10, 50, 0.40, "Fifth cousins"),
    RelationshipBand("6th Cousin", 5, 25, 0.35, "Sixth cousins"),
    RelationshipBand("7th Cousin", 0, 15, 0.30, "Seventh cousins"),
    RelationshipBand("8th Cousin", 0, 10, 0.25, "Eighth cousins"),
    RelationshipBand("9th Cousin", 0, 5, 0.20, "Ninth cousins"),
    RelationshipBand("10th Cousin", 0, 3, 0.15, "Tenth cousins"),
)


def average_pairwise_overlap(members: Sequence[SegmentRecord]) -> float:
    """Mean overlap percentage over member pairs that overlap.

    Each pair's percentage is its shared length over the shorter span, times
    100. Pairs that do not overlap are left out of the mean. Returns 100 for
    fewer than two members or when no pair overlaps.
    """
    if len(members) < 2:
        return 100.0

    total = 0.0
    count = 0
    for a, b in combinations(members, 2):
        ratio = overlap_ratio(a, b)
        if ratio > 0:
            total += ratio * 100.0
            count += 1
    return total / count if count else 100.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ConfidenceScorer:
    """Rate how trustworthy a triangulation group is, 0-100."""

    def __init__(self, config: "InternalConfig"):
        scoring = config.scoring
        self.size_cm_full = scoring.size_cm_full
        self.match_count_full = scoring.match_count_full
        self.total_cm_full = scoring.total_cm_full
        self.weights = scoring.weights

    def factors(self, group: TriangulationGroup) -> dict:
        """The four normalized factors, useful for explaining a score."""
        return {
            "size": min(group.average_size_cm / self.size_cm_full, 1.0),
            "overlap": average_pairwise_overlap(group.members) / 100.0,
            "match_count": min(group.member_count / self.match_count_full, 1.0),
            "total_cm": min(group.total_size_cm / self.total_cm_full, 1.0),
        }

    def score(self, group: TriangulationGroup) -> int:
        f = self.factors(group)
        weighted = (
            f["size"] * self.weights.size
            + f["overlap"] * self.weights.overlap
            + f["match_count"] * self.weights.match_count
            + f["total_cm"] * self.weights.total_cm
        )
        return max(0, min(100, _round_half_up(weighted * 100)))


class RelationshipPredictor:
    """Label a shared-cM total with the most probable relationship band."""

    def __init__(self, bands: Sequence[RelationshipBand] = RELATIONSHIP_BANDS):
        if not bands:
            raise ValueError("RelationshipPredictor needs at least one band")
        self.bands = tuple(bands)

    def best_band(self, total_cm: float) -> RelationshipBand:
        best = None
        for band in self.bands:
            if band.contains(total_cm) and (best is None or band.probability > best.probability):
                best = band
        return best if best is not None else self.bands[0]

    @staticmethod
    def confidence_label(probability: float) -> str:
        if probability >= 0.8:
            return "high"
        if probability >= 0.6:
            return "medium"
        return "low"

    def predict(self, total_cm: float) -> RelationshipPrediction:
        band = self.best_band(total_cm)
        return RelationshipPrediction(
            relationship=band.name,
            probability=band.probability,
            range=band.range_label,
            confidence=self.confidence_label(band.probability),
            description=band.description,
        )

    def describe(self, relationship: str) -> str:
        for band in self.bands:
            if band.name == relationship:
                return band.description
        return "Distant relationship"
