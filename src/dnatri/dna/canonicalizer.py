"""Identity canonicalization and cross-source deduplication.

The same person often appears under slightly different names across match
lists ("Doe, John", "john  doe", "Dr. John Doe Jr."). This module reduces each
name to a canonical key, merges every record sharing a key into one
``IdentityProfile``, and rewrites the per-segment records so that they all
carry the profile's display name and merged metadata.

Merge rules:
- Display name: first raw name seen for the key (input order decides)
- Haplogroups: first non-empty value seen
- Surnames, locations, notes, source files: set unions

Unusable names (purely numeric, or shorter than two characters once
canonicalized) are replaced by a placeholder unique to the source row; each
replacement is recorded as a ``NameQualityWarning``.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence, TYPE_CHECKING

from dnatri.core.records import IdentityProfile, SegmentRecord
from dnatri.errors import DataQualityError, NameQualityWarning

if TYPE_CHECKING:
    from dnatri.schemas import InternalConfig

__all__ = ['canonicalize_name', 'is_unusable_name', 'DedupResult', 'IdentityCanonicalizer']

logger = logging.getLogger(__name__)

DEFAULT_TITLES = frozenset({"mr", "mrs", "ms", "dr", "prof"})
DEFAULT_SUFFIXES = frozenset({"jr", "sr", "ii", "iii", "iv"})


def canonicalize_name(name: str, titles: Iterable[str] = DEFAULT_TITLES,
                      suffixes: Iterable[str] = DEFAULT_SUFFIXES) -> str:
    """Reduce a display name to its canonical matching key.

    Lowercases, trims and collapses whitespace, rewrites "last, first" to
    "first last", and drops courtesy titles and generational suffixes as whole
    tokens. The result contains no commas, so applying the function twice
    gives the same key.

    Examples
    --------
    >>> canonicalize_name("Doe, John")
    'john doe'
    >>> canonicalize_name("  Dr.  John   DOE Jr. ")
    'john doe'
    """
    if not name:
        return ""
    text = " ".join(name.lower().split())

    if "," in text:
        parts = [p.strip() for p in text.split(",")]
        if len(parts) == 2 and parts[0] and parts[1]:
            text = f"{parts[1]} {parts[0]}"
        else:
            text = " ".join(p for p in parts if p)

    dropped = set(titles) | set(suffixes)
    tokens = [t for t in text.split() if t.rstrip(".") not in dropped]
    return " ".join(tokens)


def is_unusable_name(canonical: str) -> bool:
    """Names that cannot identify a person."""
    compact = canonical.replace(" ", "")
    return len(canonical) < 2 or compact.isdigit()


@dataclass
class DedupResult:
    """Output of one canonicalization pass."""
    records: list = field(default_factory=list)
    profiles: dict = field(default_factory=dict)
    warnings: list = field(default_factory=list)

    @property
    def profile_count(self) -> int:
        return len(self.profiles)


class IdentityCanonicalizer:
    """Merge records that represent the same person.

    Examples
    --------
    >>> canonicalizer = IdentityCanonicalizer(config)
    >>> result = canonicalizer.canonicalize(records)
    >>> result.profile_count      # distinct people
    >>> len(result.records)       # still one record per segment
    """

    def __init__(self, config: "InternalConfig"):
        self.titles = frozenset(config.names.titles)
        self.suffixes = frozenset(config.names.suffixes)
        self.placeholder_prefix = config.names.placeholder_prefix
        self.minimum_size_cm = config.thresholds.minimum_size_cm

    def canonical_key(self, name: str) -> str:
        return canonicalize_name(name, self.titles, self.suffixes)

    def _placeholder(self, record: SegmentRecord) -> str:
        return f"{self.placeholder_prefix} ({record.source_file} row {record.row_index})"

    def _with_key(self, record: SegmentRecord, warnings: list) -> SegmentRecord:
        """Attach the canonical key, substituting a placeholder for bad names."""
        key = self.canonical_key(record.raw_name)
        if not is_unusable_name(key):
            return replace(record, canonical_name=key)

        placeholder = self._placeholder(record)
        warning = NameQualityWarning(record.source_file, record.row_index,
                                     record.raw_name, placeholder)
        warnings.append(warning)
        logger.debug("%s", warning)
        return replace(
            record,
            display_name=placeholder,
            canonical_name=self.canonical_key(placeholder),
        )

    def canonicalize(self, records: Sequence[SegmentRecord]) -> DedupResult:
        """Deduplicate identities across all sources.

        Parameters
        ----------
        records : sequence of SegmentRecord
            Validated records in source upload order.

        Returns
        -------
        DedupResult
            Rewritten records (same order and count as the input), profiles
            keyed by canonical name in first-seen order, and name warnings.

        Raises
        ------
        DataQualityError
            If no records were supplied.
        """
        if not records:
            raise DataQualityError(self.minimum_size_cm)

        result = DedupResult()
        keyed = [self._with_key(r, result.warnings) for r in records]

        for record in keyed:
            profile = result.profiles.get(record.canonical_name)
            if profile is None:
                result.profiles[record.canonical_name] = IdentityProfile.from_record(record)
            else:
                profile.absorb(record)

        result.records = [r.with_identity(result.profiles[r.canonical_name]) for r in keyed]

        merged = len(keyed) - len(result.profiles)
        logger.info("Canonicalized %d segments into %d identities (%d merged, %d name warnings)",
                    len(keyed), len(result.profiles), merged, len(result.warnings))
        if result.warnings:
            logger.warning("%d match names were unusable and replaced by placeholders",
                           len(result.warnings))
        return result
