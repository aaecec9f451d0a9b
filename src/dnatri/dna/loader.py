"""Segment sources and pedigree loading.

Header detection and pedigree-document parsing are handled outside this
package. This module only adapts their outputs for the pipeline:

- ``RowsSource``: rows that are already normalized (canonical field names)
- ``CsvSegmentSource``: a CSV whose headers are renamed through an exact,
  case-insensitive alias table from ``config.loader.column_aliases``
- ``load_tree_json``: a pedigree tree exported as JSON by an external loader

Sources are read lazily by the orchestrator, one at a time, in the order
they were supplied.
"""

import json
import logging
from pathlib import Path
from typing import Mapping, Protocol, Sequence

import pandas as pd

from dnatri.core.tree import GenealogicalTree
from dnatri.errors import SourceIOError

__all__ = ['SegmentSource', 'RowsSource', 'CsvSegmentSource', 'load_tree_json']

logger = logging.getLogger(__name__)


class SegmentSource(Protocol):
    """Anything the orchestrator can read segment rows from."""

    name: str

    def read(self) -> list[dict]:
        """Return normalized rows (canonical field name -> string)."""
        ...


class RowsSource:
    """Already-normalized rows held in memory."""

    def __init__(self, name: str, rows: Sequence[Mapping[str, str]]):
        self.name = name
        self._rows = [dict(r) for r in rows]

    def read(self) -> list[dict]:
        return [dict(r) for r in self._rows]

    def __repr__(self) -> str:
        return f"RowsSource({self.name!r}, {len(self._rows)} rows)"


class CsvSegmentSource:
    """A CSV match file read with pandas.

    Parameters
    ----------
    path : str or Path
        CSV file.
    column_aliases : mapping
        Canonical field -> accepted header names. Matching is exact after
        trimming and lowercasing; the first alias found wins for each field.
    encoding : str, optional
        File encoding (default utf-8).
    """

    def __init__(self, path: str | Path, column_aliases: Mapping[str, Sequence[str]],
                 encoding: str = "utf-8"):
        self.path = Path(path)
        self.name = self.path.name
        self.column_aliases = column_aliases
        self.encoding = encoding

    def header_mapping(self, headers: Sequence[str]) -> dict:
        """Map raw headers to canonical fields; unmapped headers keep their name."""
        lookup = {}
        for field, aliases in self.column_aliases.items():
            for alias in aliases:
                lookup.setdefault(alias.strip().lower(), field)

        mapping = {}
        claimed = set()
        for header in headers:
            field = lookup.get(str(header).strip().lower())
            if field is not None and field not in claimed:
                mapping[header] = field
                claimed.add(field)
            else:
                mapping[header] = str(header).strip()
        return mapping

    def read(self) -> list[dict]:
        df = pd.read_csv(
            self.path,
            dtype=str,
            keep_default_na=False,
            encoding=self.encoding,
            skipinitialspace=True,
        )
        mapping = self.header_mapping(list(df.columns))
        df = df.rename(columns=mapping)
        logger.debug("%s: header mapping %s", self.name, mapping)
        return df.to_dict(orient="records")

    def __repr__(self) -> str:
        return f"CsvSegmentSource({str(self.path)!r})"


def load_tree_json(path: str | Path) -> GenealogicalTree:
    """Load a pedigree tree exported as JSON.

    Raises
    ------
    SourceIOError
        If the file is missing, unreadable, not valid JSON, or not a JSON object.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise SourceIOError(path.name, exc) from exc
    if not isinstance(data, dict):
        raise SourceIOError(path.name, ValueError("tree document must be a JSON object"))
    tree = GenealogicalTree.from_dict(data)
    logger.info("Loaded genealogical tree with %d individuals, %d relationships",
                len(tree.individuals), len(tree.relationships))
    return tree
