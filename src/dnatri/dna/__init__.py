"""Segment analysis: validation, deduplication, grouping, scoring, tree matching."""

from dnatri.dna.records import parse_segment_row, first_listed_name, REQUIRED_FIELDS
from dnatri.dna.canonicalizer import IdentityCanonicalizer, canonicalize_name, DedupResult
from dnatri.dna.grouping import SegmentGrouper, overlap_ratio
from dnatri.dna.scoring import (
    ConfidenceScorer,
    RelationshipPredictor,
    RELATIONSHIP_BANDS,
    average_pairwise_overlap,
)
from dnatri.dna.crossref import TreeCrossReferencer, candidate_surnames
from dnatri.dna.loader import RowsSource, CsvSegmentSource, load_tree_json

__all__ = [
    "parse_segment_row",
    "first_listed_name",
    "REQUIRED_FIELDS",
    "IdentityCanonicalizer",
    "canonicalize_name",
    "DedupResult",
    "SegmentGrouper",
    "overlap_ratio",
    "ConfidenceScorer",
    "RelationshipPredictor",
    "RELATIONSHIP_BANDS",
    "average_pairwise_overlap",
    "TreeCrossReferencer",
    "candidate_surnames",
    "RowsSource",
    "CsvSegmentSource",
    "load_tree_json",
]
