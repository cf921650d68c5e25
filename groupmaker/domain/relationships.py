# groupmaker/domain/relationships.py
"""
Read-only relationship lookups for one roster.

Friends and keep-apart lists arrive as display names. They are resolved to
person ids once, here, and every later lookup is keyed by id. Names that
match nobody in the roster are remembered in `unresolved` and otherwise
ignored.

All relations are symmetric: a relation declared by either side counts for
both.
"""
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from groupmaker.domain.models import Annotations, EngineConfig, Person, PersonId

logger = logging.getLogger(__name__)


def name_key(name: str) -> str:
    return name.strip().casefold()


class RelationshipIndex:
    def __init__(
        self,
        roster: Sequence[Person],
        annotations: Optional[Annotations] = None,
        config: Optional[EngineConfig] = None,
    ):
        config = config or EngineConfig()
        annotations = annotations or Annotations()

        self.people: Dict[PersonId, Person] = {p.id: p for p in roster}
        self._order: Dict[PersonId, int] = {p.id: i for i, p in enumerate(roster)}
        self._by_name: Dict[str, PersonId] = {name_key(p.name): p.id for p in roster}
        self.unresolved: Set[Tuple[PersonId, str]] = set()

        self._friends: Dict[PersonId, Set[PersonId]] = {p.id: set() for p in roster}
        self._keep_apart: Dict[PersonId, Set[PersonId]] = {p.id: set() for p in roster}
        self._priority: Dict[Tuple[PersonId, PersonId], int] = {}
        self._must_together: Set[FrozenSet[PersonId]] = set()

        for person in roster:
            for other in self._resolve_all(person, person.friends, config.max_friends):
                self._friends[person.id].add(other)
                self._friends[other].add(person.id)
            for other in self._resolve_all(person, person.keep_apart, config.max_keep_apart):
                self._keep_apart[person.id].add(other)
                self._keep_apart[other].add(person.id)

        for note in annotations.friendships:
            if note.person_id not in self.people:
                self.unresolved.add((note.person_id, note.friend_name))
                continue
            other = self._resolve(self.people[note.person_id], note.friend_name)
            if other is None:
                continue
            key = (note.person_id, other)
            self._priority[key] = max(self._priority.get(key, 1), note.priority)
            if note.must_be_together:
                self._must_together.add(frozenset((note.person_id, other)))

        if self.unresolved:
            logger.debug(f"Ignoring {len(self.unresolved)} unresolved name references: {sorted(self.unresolved, key=str)}")

    # ----------------------------
    # Name resolution
    # ----------------------------
    def _resolve(self, person: Person, name: str) -> Optional[PersonId]:
        other = self._by_name.get(name_key(name))
        if other is None:
            self.unresolved.add((person.id, name))
            return None
        if other == person.id:
            return None
        return other

    def _resolve_all(self, person: Person, names: Iterable[str], limit: Optional[int]) -> List[PersonId]:
        resolved: List[PersonId] = []
        for name in names:
            if limit is not None and len(resolved) >= limit:
                break
            other = self._resolve(person, name)
            if other is not None and other not in resolved:
                resolved.append(other)
        return resolved

    # ----------------------------
    # Lookups
    # ----------------------------
    def order(self, person_id: PersonId) -> int:
        """Roster position, used as the stable tie-break everywhere."""
        return self._order[person_id]

    def are_friends(self, a: PersonId, b: PersonId) -> bool:
        return b in self._friends.get(a, ())

    def should_keep_apart(self, a: PersonId, b: PersonId) -> bool:
        return b in self._keep_apart.get(a, ())

    def friendship_priority(self, a: PersonId, b: PersonId) -> int:
        if not self.are_friends(a, b):
            return 0
        return max(self._priority.get((a, b), 1), self._priority.get((b, a), 1))

    def is_must_together(self, a: PersonId, b: PersonId) -> bool:
        return frozenset((a, b)) in self._must_together

    def friends_of(self, person_id: PersonId) -> Set[PersonId]:
        return self._friends.get(person_id, set())

    def max_priority(self, person_id: PersonId) -> int:
        return max((self.friendship_priority(person_id, f) for f in self.friends_of(person_id)), default=0)

    def must_together_pairs(self) -> List[Tuple[PersonId, PersonId]]:
        pairs = []
        for pair in self._must_together:
            a, b = sorted(pair, key=self.order)
            pairs.append((a, b))
        return sorted(pairs, key=lambda p: (self.order(p[0]), self.order(p[1])))
