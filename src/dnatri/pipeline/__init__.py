"""Pipeline modules.

- orchestrator: Stage sequencing and fail-fast checks
- export: Flat per-member export table
- results: Filtering and annotation of finished groups
"""

from dnatri.pipeline.orchestrator import TriangulationPipeline, TriangulationResult
from dnatri.pipeline.export import EXPORT_COLUMNS, build_export_table, write_export_csv
from dnatri.pipeline.results import GroupFilter, filter_groups, attach_annotation

__all__ = [
    "TriangulationPipeline",
    "TriangulationResult",
    "EXPORT_COLUMNS",
    "build_export_table",
    "write_export_csv",
    "GroupFilter",
    "filter_groups",
    "attach_annotation",
]
