"""dnatri User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the run. Advanced settings are in src/dnatri/schemas/param.py

Usage:
    python scripts/run_triangulation.py ftdna.csv -c scripts/user_config.py
    python scripts/run_triangulation.py ftdna.csv -c scripts/user_config.py --tree family.json
"""

CONFIG = {
    # ========================================================================
    # OUTPUT
    # ========================================================================
    "BASE_DIR": "./dnatri_output",  # Results and logs go here

    # ========================================================================
    # GROUPING THRESHOLDS
    # ========================================================================
    "MIN_SIZE_CM": 7,         # Segments below this size are ignored
    "MIN_MATCHES": 3,         # People needed to form a group
    "OVERLAP_THRESHOLD": 50,  # Percent of the shorter segment (0.5 also accepted)

    # ========================================================================
    # STAGES
    # ========================================================================
    "SCORE_CONFIDENCE": True,
    "PREDICT_RELATIONSHIPS": False,
    "CROSS_VERIFY": False,    # Also switched on by --tree

    # ========================================================================
    # SOURCE HEADERS
    # ========================================================================
    # Extra header names per field, added to the built-in aliases
    "loader": {
        "column_aliases": {
            "match_name": ["Relative"],
        },
    },

    "LOG_LEVEL": "INFO",
}
