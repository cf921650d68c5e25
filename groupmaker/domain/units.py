# groupmaker/domain/units.py
"""
Atomic placement units.

People linked by must-be-together flags, directly or through a chain of
links, form one unit that is always placed in a single step. Everybody else
is a unit of one.
"""
import logging
from typing import Dict, List, Sequence, Tuple

from groupmaker.domain.models import Person, Precedence
from groupmaker.domain.relationships import RelationshipIndex

logger = logging.getLogger(__name__)

Unit = Tuple[Person, ...]


class DisjointSet:
    """Union-find over roster positions. Iterative, so long chains are safe."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.members: Dict[int, List[int]] = {i: [i] for i in range(size)}

    def find(self, i: int) -> int:
        while self.parent[i] != i:
            self.parent[i] = self.parent[self.parent[i]]
            i = self.parent[i]
        return i

    def union(self, a: int, b: int) -> int:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra
        if len(self.members[ra]) < len(self.members[rb]):
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.members[ra].extend(self.members.pop(rb))
        return ra


def _components_conflict(sets: DisjointSet, ra: int, rb: int, roster: Sequence[Person], index: RelationshipIndex) -> bool:
    return any(
        index.should_keep_apart(roster[i].id, roster[j].id)
        for i in sets.members[ra]
        for j in sets.members[rb]
    )


def resolve_units(
    roster: Sequence[Person],
    index: RelationshipIndex,
    precedence: Precedence = Precedence.MUST_TOGETHER,
) -> List[Unit]:
    """
    Split the roster into connected components of the must-be-together
    relation.

    Units come back in roster order of their first member, and members
    inside a unit keep roster order.

    With Precedence.KEEP_APART, a link that would join two components
    containing a keep-apart pair is dropped instead.
    """
    sets = DisjointSet(len(roster))
    for i in range(len(roster)):
        for j in range(i + 1, len(roster)):
            if not index.is_must_together(roster[i].id, roster[j].id):
                continue
            ri, rj = sets.find(i), sets.find(j)
            if ri == rj:
                continue
            if precedence == Precedence.KEEP_APART and _components_conflict(sets, ri, rj, roster, index):
                logger.warning(
                    f"Dropping must-together link {roster[i].name!r} / {roster[j].name!r}: "
                    f"it would join people who must be kept apart"
                )
                continue
            sets.union(ri, rj)

    grouped: Dict[int, List[Person]] = {}
    for i, person in enumerate(roster):
        grouped.setdefault(sets.find(i), []).append(person)

    units = [tuple(members) for members in grouped.values()]
    linked = [u for u in units if len(u) > 1]
    if linked:
        logger.debug(f"{len(linked)} must-together units: {[[p.name for p in u] for u in linked]}")
    return units
