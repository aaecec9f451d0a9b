"""Core triangulation run logic.

This module contains the actual runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import sys
import json
import argparse
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any, Sequence

from dnatri.setup_directories import setup_output_directories, get_export_path
from dnatri.dna.loader import CsvSegmentSource, load_tree_json
from dnatri.errors import TriangulationError
from dnatri.pipeline import TriangulationPipeline, TriangulationResult
from dnatri.pipeline.export import build_export_table, write_export_csv
from dnatri.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_triangulation(
    source_paths: Sequence[str],
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    export_path: Optional[str] = None,
    verbose: bool = False
) -> TriangulationResult:
    """Execute a triangulation run over CSV match files.

    This is the core run function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories and logging
    3. Reads the CSV sources and the optional pedigree tree
    4. Runs the pipeline
    5. Writes the export CSV and prints a summary

    Parameters
    ----------
    source_paths : sequence of str
        CSV match files, in upload order.

    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: base_dir, tree_path, cross_verify,
        predict_relationships, log_level. All optional.

    export_path : str, optional
        Export CSV path. Defaults to results/<export_filename> under base_dir.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    TriangulationResult

    Raises
    ------
    FileNotFoundError
        If user_config_path does not exist.
    ValueError
        If configuration validation fails.
    TriangulationError
        If the inputs or the tree file cannot be read or triangulated.

    Examples
    --------
    Run with defaults::

        run_triangulation(["ftdna.csv", "myheritage.csv"])

    Run with a pedigree and relationship prediction::

        run_triangulation(
            ["ftdna.csv"],
            cli_args={"tree_path": "family.json", "predict_relationships": True},
        )
    """
    param_cfg = ParamConfig()  # Expert defaults

    if user_config_path is not None:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))
    else:
        user_cfg = UserConfig()

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    # Resolve to internal config (Param < User < CLI)
    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    output_dirs = setup_output_directories(config.base_dir)

    pipeline = TriangulationPipeline(config, progress=print)
    pipeline.setup_logging(output_dirs["logs"])

    print(f"\n{'='*60}")
    print("DNA Segment Triangulation")
    print('='*60)
    print(f"Config:  {user_config_path or '(defaults)'}")
    print(f"Sources: {len(source_paths)}")
    print(f"Tree:    {config.tree_path or '(none)'}")
    print(f"Output:  {config.base_dir}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    sources = [
        CsvSegmentSource(p, config.loader.column_aliases, config.loader.encoding)
        for p in source_paths
    ]
    tree = load_tree_json(config.tree_path) if config.tree_path else None

    result = pipeline.run(sources, tree=tree)

    table = build_export_table(
        result.groups, scored=config.features.enable_confidence_scoring)
    if export_path is None:
        export_path = get_export_path(output_dirs, config.output.export_filename)
    written = write_export_csv(table, export_path, na_rep=config.output.na_rep)

    print(f"\n{'='*60}")
    print(f"Segments:         {result.segment_count}")
    print(f"Unique matches:   {result.profile_count}")
    print(f"Groups:           {result.group_count}")
    print(f"Name warnings:    {len(result.warnings)}")
    print(f"Skipped rows:     {sum(result.skipped_rows.values())}")
    print(f"Export:           {written}")
    print('='*60)

    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Find triangulated DNA segment groups")
    parser.add_argument("sources", nargs="+", help="CSV match files, in upload order")
    parser.add_argument("-c", "--config", help="Path to user config file")
    parser.add_argument("--tree", help="Pedigree tree JSON (enables cross verification)")
    parser.add_argument("--no-cross-verify", action="store_true",
                        help="Load the tree but skip cross verification")
    parser.add_argument("--predict-relationships", action="store_true",
                        help="Attach predicted relationships to groups")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("-o", "--output", help="Export CSV path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    cli_args = {
        "base_dir": args.base_dir,
        "tree_path": args.tree,
        "cross_verify": False if args.no_cross_verify else None,
        "predict_relationships": True if args.predict_relationships else None,
    }

    try:
        run_triangulation(
            args.sources,
            user_config_path=args.config,
            cli_args=cli_args,
            export_path=args.output,
            verbose=args.verbose,
        )
    except TriangulationError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
