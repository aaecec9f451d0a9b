"""
Directory setup for triangulation runs.

One run writes into a base directory:
- results/ : exported CSV tables
- logs/    : run log files
"""

from pathlib import Path


def setup_output_directories(base_output_dir=None):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. Defaults to ./dnatri_output.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'results', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "dnatri_output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "results": base_output_dir / "results",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories


def get_export_path(output_dirs, filename):
    """
    Get the export CSV path inside the results directory.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    filename : str
        File name, with or without the .csv extension

    Returns
    -------
    Path
        Full path: results/filename.csv

    Example
    -------
    >>> get_export_path(dirs, 'triangulation_results')
    Path('dnatri_output/results/triangulation_results.csv')
    """
    if not filename.endswith(".csv"):
        filename = f"{filename}.csv"
    return Path(output_dirs["results"]) / filename
