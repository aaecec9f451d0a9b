"""Find overlapping segment clusters per chromosome.

Segments are sorted by start coordinate and swept once. The lowest-start
unprocessed segment becomes the seed; later segments are accepted when they
overlap the seed by at least ``overlap_threshold`` of the shorter span. The
scan stops at the first candidate starting beyond the seed's end, since no
later candidate can overlap it.

Acceptance is tested against the seed only. Two accepted candidates need
not overlap each other; the group span is the intersection of all accepted
members, and the group is dropped when that intersection is empty.
"""

import logging
from collections import defaultdict
from typing import Sequence, TYPE_CHECKING

import numpy as np

from dnatri.core.groups import TriangulationGroup, make_group
from dnatri.core.records import SegmentRecord

if TYPE_CHECKING:
    from dnatri.schemas import InternalConfig

__all__ = ['overlap_length', 'interval_overlap_ratio', 'overlap_ratio', 'SegmentGrouper']

logger = logging.getLogger(__name__)


def overlap_length(a: SegmentRecord, b: SegmentRecord) -> int:
    """Length of the shared interval, 0 when disjoint or touching."""
    return max(0, min(a.end, b.end) - max(a.start, b.start))


def interval_overlap_ratio(start_a, end_a, start_b, end_b) -> float:
    """Shared length of two intervals as a fraction of the shorter one.

    Works on plain ints and numpy scalars alike; 0.0 when disjoint or touching.
    """
    overlap = min(end_a, end_b) - max(start_a, start_b)
    if overlap <= 0:
        return 0.0
    return float(overlap / min(end_a - start_a, end_b - start_b))


def overlap_ratio(a: SegmentRecord, b: SegmentRecord) -> float:
    """Shared length as a fraction of the shorter segment."""
    return interval_overlap_ratio(a.start, a.end, b.start, b.end)


class SegmentGrouper:
    """Config-driven interval grouping.

    Parameters come from ``config.thresholds``: ``overlap_threshold`` and
    ``minimum_matches``. Segment size filtering has already happened during
    row validation.
    """

    def __init__(self, config: "InternalConfig"):
        self.overlap_threshold = config.thresholds.overlap_threshold
        self.minimum_matches = config.thresholds.minimum_matches

        logger.info("SegmentGrouper initialized: overlap_threshold=%s, minimum_matches=%s",
                    self.overlap_threshold, self.minimum_matches)

    def find_groups(self, records: Sequence[SegmentRecord]) -> list[TriangulationGroup]:
        """Group every chromosome independently, chromosomes in ascending order."""
        by_chromosome = defaultdict(list)
        for record in records:
            by_chromosome[record.chromosome].append(record)

        groups = []
        for chromosome in sorted(by_chromosome):
            found = self.group_chromosome(by_chromosome[chromosome])
            logger.debug("Chromosome %d: %d segments -> %d groups",
                         chromosome, len(by_chromosome[chromosome]), len(found))
            groups.extend(found)
        return groups

    def group_chromosome(self, records: Sequence[SegmentRecord]) -> list[TriangulationGroup]:
        """Sweep one chromosome's segments.

        The segment arena (``starts``/``ends`` in start order) and the
        ``processed`` marker array live only for this call. A segment is
        marked processed only when it lands in an emitted group; a failed
        seed stays available to later seeds' scans.
        """
        n = len(records)
        if n < self.minimum_matches:
            return []

        chromosomes = {r.chromosome for r in records}
        if len(chromosomes) != 1:
            raise ValueError(f"group_chromosome expects one chromosome, got {sorted(chromosomes)}")
        chromosome = chromosomes.pop()

        raw_starts = np.fromiter((r.start for r in records), dtype=np.int64, count=n)
        order = np.argsort(raw_starts, kind="stable")
        arena = [records[i] for i in order]
        starts = raw_starts[order]
        ends = np.fromiter((r.end for r in arena), dtype=np.int64, count=n)
        processed = np.zeros(n, dtype=bool)

        groups = []
        for i in range(n):
            if processed[i]:
                continue

            seed_start, seed_end = starts[i], ends[i]
            accepted = [i]

            for j in range(i + 1, n):
                if starts[j] > seed_end:
                    break
                if processed[j]:
                    continue

                ratio = interval_overlap_ratio(seed_start, seed_end, starts[j], ends[j])
                if ratio > 0 and ratio >= self.overlap_threshold:
                    accepted.append(j)

            if len(accepted) < self.minimum_matches:
                continue

            group = make_group(chromosome, [arena[k] for k in accepted])
            if group is None:
                logger.debug("Chromosome %d: seed at %d has empty intersection, dropped",
                             chromosome, int(seed_start))
                continue

            processed[accepted] = True
            groups.append(group)

        return groups
