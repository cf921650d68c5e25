# groupmaker/domain/scoring.py
"""
Placement scoring: how desirable is it to drop a unit into a group?

A score of None means the group is ineligible for that unit.
"""
from typing import Iterable, Optional, Sequence

from groupmaker.domain.models import EngineConfig, Gender, Person
from groupmaker.domain.relationships import RelationshipIndex


def gender_imbalance(people: Iterable[Person]) -> int:
    boys = girls = 0
    for p in people:
        if p.gender == Gender.BOY:
            boys += 1
        elif p.gender == Gender.GIRL:
            girls += 1
    return abs(boys - girls)


def has_conflict(unit: Sequence[Person], members: Sequence[Person], index: RelationshipIndex) -> bool:
    return any(index.should_keep_apart(p.id, m.id) for p in unit for m in members)


def score_placement(
    unit: Sequence[Person],
    members: Sequence[Person],
    target_size: int,
    index: RelationshipIndex,
    config: EngineConfig,
    phase: int,
    enforce_capacity: bool = True,
) -> Optional[float]:
    """
    Score placing `unit` into a group that currently holds `members`.

    Friend bonus per (unit member, group member) pair, minus a penalty that
    grows with how full the group already is, plus the change in gender
    balance when balancing is on.
    """
    occupancy = len(members)
    if enforce_capacity and occupancy + len(unit) > target_size:
        return None
    if has_conflict(unit, members, index):
        return None

    weight = config.friend_weights[phase]
    score = 0.0
    for person in unit:
        for member in members:
            score += index.friendship_priority(person.id, member.id) * weight

    score -= config.space_penalty * occupancy / target_size

    if config.balance_by_gender:
        before = gender_imbalance(members)
        after = gender_imbalance(list(members) + list(unit))
        score += config.gender_weight * (before - after)

    return score


def choose_group(scores: Sequence[Optional[float]]) -> Optional[int]:
    """Index of the best score; ties go to the lowest index. None if all ineligible."""
    best = None
    for i, score in enumerate(scores):
        if score is None:
            continue
        if best is None or score > scores[best]:
            best = i
    return best
