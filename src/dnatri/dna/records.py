"""Validate normalized source rows into SegmentRecords.

Rows arrive as mappings of canonical field name -> string value, produced by
an external header normalizer. Rows with unusable required values are skipped
(returned as None); they are never reported individually.
"""

import re
from typing import Iterable, Mapping, Optional

from dnatri.core.records import SegmentRecord

__all__ = [
    'REQUIRED_FIELDS',
    'OPTIONAL_FIELDS',
    'first_listed_name',
    'missing_required_fields',
    'parse_segment_row',
]


REQUIRED_FIELDS = ("chromosome", "start", "end", "size_cm")
OPTIONAL_FIELDS = (
    "match_name", "snps", "y_haplogroup", "mt_haplogroup",
    "surnames", "locations", "notes",
)

_LIST_SPLIT = re.compile(r"[,;|]")
_X_CHROMOSOME = 23


def first_listed_name(raw: Optional[str]) -> str:
    """Return the first name of a possibly multi-valued name cell.

    Names may be joined by ``;``, ``|`` or ``,``. A single comma with a
    one-word left side is read as "Last, First" and kept whole.
    """
    if not raw:
        return ""
    text = re.split(r"[;|]", raw, maxsplit=1)[0].strip()
    if "," not in text:
        return text
    left, _, right = text.partition(",")
    if "," not in right and len(left.split()) == 1 and right.strip():
        return text
    return left.strip()


def _split_list(value: Optional[str]) -> frozenset:
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in _LIST_SPLIT.split(value) if part.strip())


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Integer from text with thousands separators; None if unusable."""
    if value is None:
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _parse_chromosome(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower().startswith("chr"):
        text = text[3:]
    if text.upper() == "X":
        return _X_CHROMOSOME
    chromosome = _parse_int(text)
    if chromosome is None or not 1 <= chromosome <= 23:
        return None
    return chromosome


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def missing_required_fields(rows: Iterable[Mapping[str, str]]) -> list[str]:
    """Required fields absent from the first row of a source."""
    for row in rows:
        return [f for f in REQUIRED_FIELDS if f not in row]
    return []


def parse_segment_row(row: Mapping[str, str], source_file: str, row_index: int,
                      minimum_size_cm: float) -> Optional[SegmentRecord]:
    """Validate one normalized row.

    Parameters
    ----------
    row : mapping
        Canonical field name -> raw string value.
    source_file : str
        Tag of the source the row came from.
    row_index : int
        Zero-based position of the row in its source.
    minimum_size_cm : float
        Segments smaller than this are rejected.

    Returns
    -------
    SegmentRecord or None
        None when chromosome, coordinates or size are unusable.
    """
    chromosome = _parse_chromosome(row.get("chromosome"))
    start = _parse_int(row.get("start"))
    end = _parse_int(row.get("end"))
    size_cm = _parse_float(row.get("size_cm"))

    if chromosome is None or start is None or end is None or size_cm is None:
        return None
    if start <= 0 or end <= start:
        return None
    if size_cm < minimum_size_cm:
        return None

    name = first_listed_name(row.get("match_name"))
    extras = {
        k: v for k, v in row.items()
        if k not in REQUIRED_FIELDS and k not in OPTIONAL_FIELDS
    }
    notes = _optional_text(row.get("notes"))

    return SegmentRecord(
        raw_name=name,
        display_name=name,
        canonical_name=name,
        chromosome=chromosome,
        start=start,
        end=end,
        size_cm=size_cm,
        source_file=source_file,
        row_index=row_index,
        snps=_parse_int(row.get("snps")),
        y_haplogroup=_optional_text(row.get("y_haplogroup")),
        mt_haplogroup=_optional_text(row.get("mt_haplogroup")),
        surnames=_split_list(row.get("surnames")),
        locations=_split_list(row.get("locations")),
        notes=frozenset([notes]) if notes else frozenset(),
        extras=extras,
    )
