"""Flat export table: one row per group member.

Annotation values (notes, surnames, locations) take precedence over the
record's own metadata when a group has been annotated. Multi-valued cells
are joined with ``"; "`` in sorted order so exports are reproducible.
"""

import logging
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from dnatri.core.groups import TriangulationGroup

__all__ = ['EXPORT_COLUMNS', 'build_export_table', 'write_export_csv']

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Group ID",
    "Match Name",
    "Chromosome",
    "Start Position",
    "End Position",
    "Size (cM)",
    "SNP Count",
    "Y-Haplogroup",
    "mtDNA-Haplogroup",
    "Group Members",
    "Confidence Score",
    "Predicted Relationship",
    "Notes",
    "Surnames",
    "Locations",
    "Tags",
    "Tree Matches",
    "Common Ancestors",
]

_SEPARATOR = "; "


def _join(values: Iterable[str]) -> str | None:
    items = sorted({v for v in values if v})
    return _SEPARATOR.join(items) if items else None


def _group_rows(group: TriangulationGroup, scored: bool = True) -> list[dict]:
    annotation = group.annotation
    relationship = group.relationship.relationship if group.relationship else None
    tree_matches = _join(name for m in group.tree_matches for name in m.individuals)
    ancestors = _SEPARATOR.join(group.common_ancestors) or None
    score = group.confidence_score if scored else None

    rows = []
    for member in group.members:
        if annotation is not None:
            notes = annotation.notes or _join(member.notes)
            surnames = _join(annotation.surnames) or _join(member.surnames)
            locations = _join(annotation.locations) or _join(member.locations)
            tags = _join(annotation.tags)
        else:
            notes = _join(member.notes)
            surnames = _join(member.surnames)
            locations = _join(member.locations)
            tags = None

        rows.append({
            "Group ID": group.group_id,
            "Match Name": member.display_name,
            "Chromosome": member.chromosome,
            "Start Position": member.start,
            "End Position": member.end,
            "Size (cM)": member.size_cm,
            "SNP Count": member.snps,
            "Y-Haplogroup": member.y_haplogroup,
            "mtDNA-Haplogroup": member.mt_haplogroup,
            "Group Members": group.member_count,
            "Confidence Score": score,
            "Predicted Relationship": relationship,
            "Notes": notes,
            "Surnames": surnames,
            "Locations": locations,
            "Tags": tags,
            "Tree Matches": tree_matches,
            "Common Ancestors": ancestors,
        })
    return rows


def build_export_table(groups: Sequence[TriangulationGroup],
                       scored: bool = True) -> pd.DataFrame:
    """Flatten groups into a DataFrame with ``EXPORT_COLUMNS``, in group order.

    With ``scored=False`` the confidence column is left empty.
    """
    rows = [row for group in groups for row in _group_rows(group, scored)]
    table = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    # Keep optional integers integral in the CSV
    table["SNP Count"] = table["SNP Count"].astype("Int64")
    table["Confidence Score"] = table["Confidence Score"].astype("Int64")
    return table


def write_export_csv(table: pd.DataFrame, path: str | Path, na_rep: str = "N/A") -> Path:
    """Write the export table; missing values are written as ``na_rep``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False, na_rep=na_rep)
    logger.info("Exported %d rows to %s", len(table), path)
    return path
