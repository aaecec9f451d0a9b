"""`dnatri` - DNA segment triangulation across match lists.

Subpackages:
- core: Typed records, identity profiles, groups and pedigree tree
- dna: Row validation, deduplication, grouping, scoring, tree cross-reference
- pipeline: Orchestrator, export table, filtering and annotation
- schemas: Pydantic configuration layers
- contracts: Fail-fast stage invariants
"""

__version__ = "0.1.0"
