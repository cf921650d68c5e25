# groupmaker/domain/metrics.py
"""
Read-only reporting over a finished partition.

compute_metrics never changes the groups it is given; running it twice on
the same input gives the same numbers.
"""
from typing import Dict, Optional, Sequence

from groupmaker.domain.models import Annotations, EngineConfig, Group, Metrics, Person, PersonId
from groupmaker.domain.relationships import RelationshipIndex
from groupmaker.domain.scoring import gender_imbalance


def measure(groups: Sequence[Group], index: RelationshipIndex, config: EngineConfig) -> Metrics:
    placement: Dict[PersonId, int] = {}
    friend_pairs = 0
    priority = 0
    keep_apart = 0
    overflow = 0

    for position, group in enumerate(groups):
        members = group.members
        for i, person in enumerate(members):
            placement[person.id] = position
            for other in members[i + 1:]:
                if index.are_friends(person.id, other.id):
                    friend_pairs += 1
                    priority += index.friendship_priority(person.id, other.id)
                if index.should_keep_apart(person.id, other.id):
                    keep_apart += 1
        overflow += max(0, len(members) - group.target_size)

    split = sum(
        1
        for a, b in index.must_together_pairs()
        if a in placement and b in placement and placement[a] != placement[b]
    )

    imbalance = None
    if config.balance_by_gender:
        imbalance = sum(gender_imbalance(g.members) for g in groups)

    return Metrics(
        friend_pairs_satisfied=friend_pairs,
        priority_score=priority,
        must_together_violations=split,
        keep_apart_violations=keep_apart,
        gender_imbalance=imbalance,
        capacity_overflow=overflow,
        unresolved_references=len(index.unresolved),
    )


def compute_metrics(
    groups: Sequence[Group],
    roster: Sequence[Person],
    annotations: Optional[Annotations] = None,
    config: Optional[EngineConfig] = None,
) -> Metrics:
    config = config or EngineConfig()
    index = RelationshipIndex(roster, annotations, config)
    return measure(groups, index, config)
