"""Formal pipeline invariants.

This file documents what each stage MUST produce. Use it as a reviewer anchor
and system reference.
"""

PIPELINE_INVARIANTS = {
    "records": [
        "Chromosome is an integer in [1, 23]",
        "start < end, both integers, start > 0",
        "size_cm >= configured minimum_size_cm",
        "Records are immutable once validated",
    ],

    "canonicalization": [
        "canonicalize_name(canonicalize_name(x)) == canonicalize_name(x)",
        "One IdentityProfile per canonical name",
        "Display name is the first raw name seen for that canonical name",
        "Set-valued fields are unions (independent of input order)",
        "One output record per input record, in input order",
    ],

    "grouping": [
        "Each group has member_count >= minimum_matches",
        "Group span is the intersection of member spans, start < end",
        "Each segment belongs to at most one group per chromosome",
        "Candidates are accepted against the seed only",
    ],

    "ancestor_split": [
        "Groups without tree ancestors pass through unchanged",
        "Each sub-group has member_count >= minimum_matches",
        "Input group list is not mutated",
    ],

    "scoring": [
        "confidence_score is an int in [0, 100]",
        "Relationship band has the highest prior among containing bands",
    ],

    "output": [
        "Groups sorted by (primary ancestor, chromosome, start)",
        "group_id is assigned at creation and never changes",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "records": "REQUIRED",
    "canonicalization": "REQUIRED",
    "tree_enrichment": "OPTIONAL",   # Only with cross verification and a tree
    "grouping": "REQUIRED",
    "ancestor_split": "OPTIONAL",    # Only with cross verification and a tree
    "scoring": "OPTIONAL",           # Feature toggles
    "output": "REQUIRED",
}
