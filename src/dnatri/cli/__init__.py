"""Command-line interface modules for dnatri runs.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from dnatri.cli.run_triangulation import run_triangulation, load_user_config_dict

__all__ = ['run_triangulation', 'load_user_config_dict']
