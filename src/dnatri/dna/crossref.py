"""Cross-reference match identities against a pedigree tree.

Three operations, all read-only with respect to the tree:

1. **Identity matching**: an individual matches an identity when either full
   name contains the other (case-insensitive), or when one of its surnames
   contains or is contained by one of the identity's candidate surnames
   (last token of the display name plus explicit ancestral surnames).

2. **Ancestor splitting**: an overlap group whose members reference tree
   individuals is fanned out into one sub-group per referenced individual.
   Sub-groups are rebuilt from scratch (span and aggregates) and dropped when
   they fall below ``minimum_matches``. Members without any reference are
   left out of every sub-group. Groups with no references pass through.

3. **Common ancestor suggestion**: every surname seen among a group's
   members is matched against tree surnames; the matching individuals'
   names become the group's ``common_ancestors``.
"""

import logging
from typing import Iterable, Mapping, Sequence

from dnatri.core.groups import TreeMatch, TriangulationGroup, make_group
from dnatri.core.records import SegmentRecord
from dnatri.core.tree import GenealogicalTree

__all__ = ['candidate_surnames', 'TreeCrossReferencer']

logger = logging.getLogger(__name__)


def candidate_surnames(display_name: str, surnames: Iterable[str] = ()) -> set:
    """Lowercase surnames that may link an identity to the tree."""
    candidates = {s.strip().lower() for s in surnames if s and s.strip()}
    tokens = display_name.split()
    if tokens:
        candidates.add(tokens[-1].lower())
    return candidates


def _contains_either(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return a in b or b in a


class TreeCrossReferencer:
    """Match identities and groups against one pedigree tree.

    Examples
    --------
    >>> xref = TreeCrossReferencer(tree)
    >>> matches = xref.enrich(records)
    >>> groups = xref.split_by_ancestor(groups, matches, minimum_matches=3)
    >>> xref.annotate(groups, matches)
    """

    def __init__(self, tree: GenealogicalTree):
        self.tree = tree

    def match_identity(self, display_name: str, surnames: Iterable[str] = ()) -> TreeMatch:
        name = display_name.strip().lower()
        candidates = candidate_surnames(display_name, surnames)

        individuals = []
        matched_surnames = []
        for ind in self.tree.individuals:
            ind_name = ind.name.strip().lower()
            ind_surnames = [s.strip().lower() for s in ind.surnames if s and s.strip()]

            name_hit = _contains_either(ind_name, name)
            surname_hits = [s for s in ind_surnames
                            if any(_contains_either(s, c) for c in candidates)]

            if name_hit or surname_hits:
                if ind.name not in individuals:
                    individuals.append(ind.name)
                for s in surname_hits:
                    if s not in matched_surnames:
                        matched_surnames.append(s)

        return TreeMatch(identity=display_name, individuals=tuple(individuals),
                         surnames=tuple(matched_surnames))

    def enrich(self, records: Sequence[SegmentRecord]) -> dict:
        """One TreeMatch per distinct identity, keyed by display name."""
        matches = {}
        for record in records:
            if record.display_name not in matches:
                matches[record.display_name] = self.match_identity(
                    record.display_name, record.surnames
                )
        matched = sum(1 for m in matches.values() if not m.is_empty)
        logger.info("Tree enrichment: %d of %d identities matched %d individuals",
                    matched, len(matches), len(self.tree))
        return matches

    def split_by_ancestor(self, groups: Sequence[TriangulationGroup],
                          matches: Mapping[str, TreeMatch],
                          minimum_matches: int) -> list[TriangulationGroup]:
        """Fan each group out into ancestor-specific sub-groups.

        Returns a new list; the input groups are not modified.
        """
        result = []
        for group in groups:
            ancestors = []
            for member in group.members:
                match = matches.get(member.display_name)
                if match is None:
                    continue
                for name in match.individuals:
                    if name not in ancestors:
                        ancestors.append(name)

            if not ancestors:
                result.append(group)
                continue

            for ancestor in ancestors:
                members = list(dict.fromkeys(
                    m for m in group.members
                    if ancestor in matches.get(m.display_name, TreeMatch(m.display_name)).individuals
                ))
                if len(members) < minimum_matches:
                    continue
                sub_group = make_group(group.chromosome, members, ancestor=ancestor)
                if sub_group is not None:
                    result.append(sub_group)

        logger.info("Ancestor split: %d groups -> %d groups", len(groups), len(result))
        return result

    def suggest_common_ancestors(self, group: TriangulationGroup) -> list[str]:
        surnames = set()
        for member in group.members:
            surnames |= candidate_surnames(member.display_name, member.surnames)

        names = []
        for ind in self.tree.individuals:
            for surname in ind.surnames:
                s = surname.strip().lower()
                if any(_contains_either(s, c) for c in surnames):
                    if ind.name not in names:
                        names.append(ind.name)
                    break
        return names

    def annotate(self, groups: Sequence[TriangulationGroup],
                 matches: Mapping[str, TreeMatch]) -> None:
        """Attach per-member tree matches and common ancestors to each group."""
        for group in groups:
            seen = []
            for member in group.members:
                match = matches.get(member.display_name)
                if match is not None and not match.is_empty and match not in seen:
                    seen.append(match)
            group.tree_matches = seen
            group.common_ancestors = self.suggest_common_ancestors(group)
