# groupmaker/domain/rebalance.py
"""
Optional swap pass run after the greedy placement.

Pairs of people in different groups are swapped when the swap strictly
improves the partition objective and brings no keep-apart pair together.
Every candidate is a new layout value; the current one is replaced only on
improvement. Group sizes never change and members of must-together units
never move.
"""
import logging
from typing import List, Sequence, Set, Tuple

from groupmaker.domain.models import EngineConfig, Group, Person, PersonId
from groupmaker.domain.relationships import RelationshipIndex
from groupmaker.domain.scoring import gender_imbalance, has_conflict
from groupmaker.domain.units import Unit

logger = logging.getLogger(__name__)

PHASE_REMAINDER = 2
MIN_GAIN = 1e-9

Layout = Tuple[Tuple[Person, ...], ...]


def group_value(members: Sequence[Person], index: RelationshipIndex, config: EngineConfig) -> float:
    value = 0.0
    for i, person in enumerate(members):
        for other in members[i + 1:]:
            value += config.friend_weights[PHASE_REMAINDER] * index.friendship_priority(person.id, other.id)
            if index.should_keep_apart(person.id, other.id):
                value -= config.keep_apart_weight
    if config.balance_by_gender:
        value -= config.gender_weight * gender_imbalance(members)
    return value


def partition_objective(groups: Sequence[Group], index: RelationshipIndex, config: EngineConfig) -> float:
    return sum(group_value(g.members, index, config) for g in groups)


def _replace(members: Tuple[Person, ...], position: int, person: Person) -> Tuple[Person, ...]:
    return members[:position] + (person,) + members[position + 1:]


def _improving_pass(layout: Layout, movable: Set[PersonId], index: RelationshipIndex, config: EngineConfig) -> Tuple[Layout, int]:
    values = [group_value(m, index, config) for m in layout]
    swaps = 0
    for ga in range(len(layout)):
        for gb in range(ga + 1, len(layout)):
            for ia in range(len(layout[ga])):
                for ib in range(len(layout[gb])):
                    a, b = layout[ga][ia], layout[gb][ib]
                    if a.id not in movable or b.id not in movable:
                        continue
                    rest_a = layout[ga][:ia] + layout[ga][ia + 1:]
                    rest_b = layout[gb][:ib] + layout[gb][ib + 1:]
                    if has_conflict((b,), rest_a, index) or has_conflict((a,), rest_b, index):
                        continue
                    new_a = _replace(layout[ga], ia, b)
                    new_b = _replace(layout[gb], ib, a)
                    value_a = group_value(new_a, index, config)
                    value_b = group_value(new_b, index, config)
                    if value_a + value_b - values[ga] - values[gb] <= MIN_GAIN:
                        continue
                    layout = tuple(
                        new_a if k == ga else new_b if k == gb else members
                        for k, members in enumerate(layout)
                    )
                    values[ga], values[gb] = value_a, value_b
                    swaps += 1
    return layout, swaps


def rebalance(
    groups: Sequence[Group],
    units: Sequence[Unit],
    index: RelationshipIndex,
    config: EngineConfig,
) -> List[Group]:
    movable = {unit[0].id for unit in units if len(unit) == 1}
    layout: Layout = tuple(tuple(g.members) for g in groups)

    total = 0
    for round_no in range(config.rebalance_rounds):
        layout, swaps = _improving_pass(layout, movable, index, config)
        logger.debug(f"Rebalance round {round_no + 1}: {swaps} swaps")
        total += swaps
        if not swaps:
            break

    if total:
        logger.info(f"Rebalance adopted {total} swaps")
    return [g.model_copy(update={"members": list(members)}) for g, members in zip(groups, layout)]
