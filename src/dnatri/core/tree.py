"""In-memory pedigree tree consumed by the cross-referencer.

The tree is produced by an external pedigree-document loader and is read-only
for the duration of a run.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

__all__ = ['Individual', 'Relationship', 'GenealogicalTree']


@dataclass(frozen=True)
class Individual:
    id: str
    name: str
    surnames: tuple = ()
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    locations: tuple = ()


@dataclass(frozen=True)
class Relationship:
    id: str
    individual1: str
    individual2: str
    kind: str  # "spouse" or "parent-child"


@dataclass(frozen=True)
class GenealogicalTree:
    individuals: tuple = ()
    relationships: tuple = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenealogicalTree":
        """Build a tree from the JSON layout emitted by the pedigree loader.

        Accepts both camelCase keys (``birthDate``, ``relationshipType``) and
        their snake_case equivalents.
        """
        individuals = tuple(
            Individual(
                id=str(item["id"]),
                name=str(item.get("name") or "Unknown"),
                surnames=tuple(s for s in item.get("surnames", ()) if s),
                birth_date=item.get("birthDate", item.get("birth_date")),
                death_date=item.get("deathDate", item.get("death_date")),
                locations=tuple(item.get("locations") or ()),
            )
            for item in data.get("individuals", ())
        )
        relationships = tuple(
            Relationship(
                id=str(item.get("id", "")),
                individual1=str(item["individual1"]),
                individual2=str(item["individual2"]),
                kind=str(item.get("relationshipType", item.get("kind", ""))),
            )
            for item in data.get("relationships", ())
        )
        return cls(individuals=individuals, relationships=relationships)

    def surnames(self) -> set:
        """Distinct lowercase surnames across all individuals."""
        return {
            s.strip().lower()
            for ind in self.individuals
            for s in ind.surnames
            if s and s.strip()
        }

    def __len__(self) -> int:
        return len(self.individuals)
