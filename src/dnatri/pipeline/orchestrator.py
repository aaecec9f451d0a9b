"""Sequential triangulation pipeline orchestration.

Runs every stage in order on one in-memory record set and returns the
ordered groups. No threads and no shared state between runs.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence, TYPE_CHECKING

from dnatri.contracts import assert_canonicalized, assert_grouped, assert_scored
from dnatri.core.tree import GenealogicalTree
from dnatri.dna.canonicalizer import IdentityCanonicalizer
from dnatri.dna.crossref import TreeCrossReferencer
from dnatri.dna.grouping import SegmentGrouper
from dnatri.dna.loader import SegmentSource
from dnatri.dna.records import missing_required_fields, parse_segment_row
from dnatri.dna.scoring import ConfidenceScorer, RelationshipPredictor
from dnatri.errors import DataQualityError, InputError, SchemaError, SourceIOError

if TYPE_CHECKING:
    from dnatri.schemas import InternalConfig

__all__ = ['TriangulationResult', 'TriangulationPipeline']

logger = logging.getLogger(__name__)


@dataclass
class TriangulationResult:
    """Everything one run produced.

    ``skipped_rows`` maps source name to the number of rows that failed
    validation in that source.
    """
    groups: list = field(default_factory=list)
    warnings: list = field(default_factory=list)
    segment_count: int = 0
    profile_count: int = 0
    skipped_rows: dict = field(default_factory=dict)

    @property
    def group_count(self) -> int:
        return len(self.groups)


class TriangulationPipeline:
    """Run segment triangulation from normalized sources to sorted groups.

    This is the main entry point for library callers. Stages run in a fixed
    order, each followed by its contract check:

    1. **Read**: sources are read one at a time, in the order supplied. A
       source that cannot be read, or whose rows lack the required fields,
       aborts the run with the source name in the error.

    2. **Validate**: rows with unusable chromosome, coordinates or size are
       skipped and counted per source.

    3. **Canonicalize**: identities are merged across sources.

    4. **Tree enrichment** (when cross verification is enabled and a tree is
       supplied): each identity is matched against the pedigree.

    5. **Group**: overlap clusters are found per chromosome.

    6. **Ancestor split** (with tree enrichment): groups are fanned out per
       referenced ancestor, then annotated with tree matches and suggested
       common ancestors.

    7. **Score**: confidence scores and relationship predictions, each
       behind its feature toggle.

    8. **Sort**: by (primary ancestor, chromosome, start).

    Progress messages are sent to ``progress`` (if given) at each stage
    boundary and also logged at INFO. The sink never influences the run.

    Example usage::

        from dnatri.pipeline import TriangulationPipeline
        from dnatri.dna import RowsSource

        pipeline = TriangulationPipeline(config, progress=print)
        result = pipeline.run([RowsSource("ftdna.csv", rows)])
        for group in result.groups:
            print(group.chromosome, group.start, group.end, group.member_count)
    """

    def __init__(self, config: "InternalConfig",
                 progress: Optional[Callable[[str], None]] = None):
        """Initialize the pipeline.

        Parameters
        ----------
        config : InternalConfig
            Fully resolved runtime configuration.
        progress : callable, optional
            Receives one human-readable message per stage boundary.
        """
        self.config = config
        self.progress = progress

        self.canonicalizer = IdentityCanonicalizer(config)
        self.grouper = SegmentGrouper(config)
        self.scorer = ConfidenceScorer(config)
        self.predictor = RelationshipPredictor()

    def setup_logging(self, log_dir: Optional[str | Path] = None) -> Optional[Path]:
        """Configure root logging for a CLI run.

        A console handler is always installed; a file handler is added when
        ``log_dir`` is given. Existing root handlers are replaced.

        Returns
        -------
        Path or None
            The log file path, if one was created.
        """
        log_level = getattr(logging, self.config.logging.level.upper(), logging.INFO)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        log_path = None
        if log_dir is not None:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / "triangulation.log"
            fh = logging.FileHandler(log_path)
            fh.setLevel(log_level)
            fh.setFormatter(formatter)
            root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", logging.getLevelName(log_level), log_path)
        return log_path

    def _report(self, message: str) -> None:
        logger.info("%s", message)
        if self.progress is None:
            return
        try:
            self.progress(message)
        except Exception as exc:
            logger.warning("Progress sink failed: %s", exc)

    def _read_source(self, source: SegmentSource, result: TriangulationResult) -> list:
        """Read and validate one source. Schema and I/O failures are fatal."""
        name = source.name
        try:
            rows = source.read()
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise SourceIOError(name, exc) from exc

        missing = missing_required_fields(rows)
        if missing:
            raise SchemaError(name, missing)

        minimum_size_cm = self.config.thresholds.minimum_size_cm
        records = []
        skipped = 0
        for index, row in enumerate(rows):
            record = parse_segment_row(row, name, index, minimum_size_cm)
            if record is None:
                skipped += 1
                logger.debug("%s row %d skipped: failed validation", name, index)
                continue
            records.append(record)

        result.skipped_rows[name] = skipped
        logger.info("%s: %d rows, %d valid segments, %d skipped",
                    name, len(rows), len(records), skipped)
        return records

    def run(self, sources: Sequence[SegmentSource],
            tree: Optional[GenealogicalTree] = None) -> TriangulationResult:
        """Execute the full pipeline.

        Parameters
        ----------
        sources : sequence of SegmentSource
            Normalized row sources, in upload order.
        tree : GenealogicalTree, optional
            Pedigree used when cross verification is enabled.

        Returns
        -------
        TriangulationResult

        Raises
        ------
        InputError
            If ``sources`` is empty.
        SourceIOError
            If a source cannot be read.
        SchemaError
            If a source lacks the required fields.
        DataQualityError
            If no valid segments remain after validation.
        ContractViolation
            If a stage breaks its own guarantees.
        """
        if not sources:
            raise InputError()

        features = self.config.features
        thresholds = self.config.thresholds
        result = TriangulationResult()

        records = []
        for position, source in enumerate(sources, start=1):
            self._report(f"Reading {source.name} ({position}/{len(sources)})")
            records.extend(self._read_source(source, result))

        if not records:
            raise DataQualityError(thresholds.minimum_size_cm, [s.name for s in sources])
        result.segment_count = len(records)

        self._report(f"Deduplicating {len(records)} segments")
        dedup = self.canonicalizer.canonicalize(records)
        assert_canonicalized(dedup.records, dedup.profiles)
        result.warnings = dedup.warnings
        result.profile_count = dedup.profile_count
        records = dedup.records

        crossref = None
        matches = {}
        if features.enable_cross_verification and tree is not None:
            self._report(f"Cross-referencing {dedup.profile_count} identities with the tree")
            crossref = TreeCrossReferencer(tree)
            matches = crossref.enrich(records)
        elif features.enable_cross_verification:
            logger.warning("Cross verification enabled but no tree supplied; skipping")

        self._report("Finding overlapping segments")
        groups = self.grouper.find_groups(records)
        assert_grouped(groups, thresholds.minimum_matches)
        logger.info("Found %d triangulation groups", len(groups))

        if crossref is not None:
            self._report("Splitting groups by ancestor")
            groups = crossref.split_by_ancestor(groups, matches, thresholds.minimum_matches)
            assert_grouped(groups, thresholds.minimum_matches, partitioned=False)
            crossref.annotate(groups, matches)

        if features.enable_confidence_scoring or features.enable_relationship_prediction:
            self._report("Scoring groups")
        for group in groups:
            if features.enable_confidence_scoring:
                group.confidence_score = self.scorer.score(group)
            if features.enable_relationship_prediction:
                group.relationship = self.predictor.predict(group.total_size_cm)
        assert_scored(groups)

        groups.sort(key=lambda g: g.sort_key)
        result.groups = groups

        self._report(f"Done: {len(groups)} groups from {result.profile_count} matches")
        return result
