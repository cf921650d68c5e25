# groupmaker/domain/grouping.py
"""
Greedy constraint-aware group assignment.

Pure domain logic: plain models in, plain models out, no I/O. The caller
supplies a roster, the group layout, friendship annotations and an
EngineConfig, and gets back a partition covering every person exactly once
plus a Metrics summary.

Placement runs in three phases over atomic units (see units.py):

- phase 0: must-together units of two or more, largest first
- phase 1: units with at least one friend, strongest friendships first
- phase 2: everyone left, in roster order

Capacity and keep-apart are overridden, never enforced by dropping people.
Every override is logged and shows up in the metrics.
"""
import logging
from typing import List, Optional, Sequence

from groupmaker.domain.errors import InvalidConfigurationError
from groupmaker.domain.metrics import measure
from groupmaker.domain.models import Annotations, AssignmentResult, EngineConfig, Group, GroupSpec, Person
from groupmaker.domain.rebalance import rebalance
from groupmaker.domain.relationships import RelationshipIndex, name_key
from groupmaker.domain.scoring import choose_group, has_conflict, score_placement
from groupmaker.domain.units import Unit, resolve_units

logger = logging.getLogger(__name__)

PHASE_MUST_TOGETHER = 0
PHASE_FRIENDS = 1
PHASE_REMAINDER = 2


def validate_inputs(roster: Sequence[Person], group_specs: Sequence[GroupSpec]) -> None:
    if not roster:
        raise InvalidConfigurationError("Roster is empty")
    if not group_specs:
        raise InvalidConfigurationError("At least one group is required")
    for number, spec in enumerate(group_specs, start=1):
        if spec.target_size <= 0:
            raise InvalidConfigurationError(f"Group {number} has non-positive target size {spec.target_size}")

    ids = set()
    names = set()
    for person in roster:
        if person.id in ids:
            raise InvalidConfigurationError(f"Duplicate person id {person.id!r}")
        key = name_key(person.name)
        if key in names:
            raise InvalidConfigurationError(f"Duplicate name {person.name!r}")
        ids.add(person.id)
        names.add(key)


class Placement:
    """Working state of one run. Lives only inside assign_groups."""

    def __init__(self, group_specs: Sequence[GroupSpec], index: RelationshipIndex, config: EngineConfig):
        self.specs = list(group_specs)
        self.index = index
        self.config = config
        self.members: List[List[Person]] = [[] for _ in self.specs]
        self.forced = 0

    def free(self, g: int) -> int:
        return self.specs[g].target_size - len(self.members[g])

    def scores(self, unit: Unit, phase: int, enforce_capacity: bool = True) -> List[Optional[float]]:
        return [
            score_placement(unit, members, spec.target_size, self.index, self.config, phase, enforce_capacity)
            for spec, members in zip(self.specs, self.members)
        ]

    def place(self, unit: Unit, g: int) -> None:
        self.members[g].extend(unit)

    def groups(self) -> List[Group]:
        return [
            Group(id=number, target_size=spec.target_size, members=list(members))
            for number, (spec, members) in enumerate(zip(self.specs, self.members), start=1)
        ]


# ----------------------------
# Phases
# ----------------------------
def place_must_together(units: Sequence[Unit], state: Placement) -> List[Unit]:
    """Place every multi-person unit whole. Returns the units still unplaced."""
    linked = sorted((u for u in units if len(u) > 1), key=len, reverse=True)
    for unit in linked:
        g = choose_group(state.scores(unit, PHASE_MUST_TOGETHER))
        if g is None:
            clean = [i for i in range(len(state.specs)) if not has_conflict(unit, state.members[i], state.index)]
            candidates = clean or list(range(len(state.specs)))
            g = max(candidates, key=lambda i: (state.free(i), -i))
            state.forced += 1
            logger.warning(
                f"No group fits must-together unit {[p.name for p in unit]}; "
                f"forcing it into group {g + 1} ({state.free(g)} free of {state.specs[g].target_size})"
            )
        state.place(unit, g)
    return [u for u in units if len(u) == 1]


def place_friends(units: Sequence[Unit], state: Placement) -> List[Unit]:
    """Place units that have friends, strongest friendships first. Returns leftovers."""
    index = state.index
    befriended = [u for u in units if any(index.friends_of(p.id) for p in u)]
    ordered = sorted(
        befriended,
        key=lambda u: (
            -max(index.max_priority(p.id) for p in u),
            -sum(len(index.friends_of(p.id)) for p in u),
        ),
    )

    placed = set()
    for unit in ordered:
        g = choose_group(state.scores(unit, PHASE_FRIENDS))
        if g is None:
            continue
        state.place(unit, g)
        placed.add(unit[0].id)
    return [u for u in units if u[0].id not in placed]


def place_remainder(units: Sequence[Unit], state: Placement) -> None:
    for unit in units:
        g = choose_group(state.scores(unit, PHASE_REMAINDER))
        if g is None:
            g = choose_group(state.scores(unit, PHASE_REMAINDER, enforce_capacity=False))
            if g is not None:
                logger.info(f"All groups full; {[p.name for p in unit]} goes over capacity into group {g + 1}")
        if g is None:
            g = min(range(len(state.specs)), key=lambda i: (len(state.members[i]), i))
            state.forced += 1
            logger.warning(f"Every group keeps {[p.name for p in unit]} apart from someone; forcing into group {g + 1}")
        state.place(unit, g)


# ----------------------------
# Entry point
# ----------------------------
def assign_groups(
    roster: Sequence[Person],
    group_specs: Sequence[GroupSpec],
    annotations: Optional[Annotations] = None,
    config: Optional[EngineConfig] = None,
) -> AssignmentResult:
    """
    Partition `roster` into len(group_specs) groups.

    Raises InvalidConfigurationError for an empty roster, no groups, a
    non-positive target size or duplicate ids / names. Anything else is
    absorbed and reported through the returned metrics.

    >>> people = [Person(id=1, name="Alice", friends=["Bob"]), Person(id=2, name="Bob"), Person(id=3, name="Cara", gender="girl")]
    >>> result = assign_groups(people, [GroupSpec(target_size=2), GroupSpec(target_size=1)])
    >>> [[p.name for p in g.members] for g in result.groups]
    [['Alice', 'Bob'], ['Cara']]
    """
    config = config or EngineConfig()
    validate_inputs(roster, group_specs)

    index = RelationshipIndex(roster, annotations, config)
    units = resolve_units(roster, index, config.precedence)
    state = Placement(group_specs, index, config)

    remaining = place_must_together(units, state)
    logger.debug(f"Phase 0 done, {len(remaining)} units left")
    remaining = place_friends(remaining, state)
    logger.debug(f"Phase 1 done, {len(remaining)} units left")
    place_remainder(remaining, state)

    groups = state.groups()
    if config.rebalance_rounds:
        groups = rebalance(groups, units, index, config)

    metrics = measure(groups, index, config)
    logger.info(
        f"Assigned {len(roster)} people into {len(groups)} groups "
        f"(friend pairs {metrics.friend_pairs_satisfied}, keep-apart violations {metrics.keep_apart_violations}, "
        f"forced placements {state.forced})"
    )
    return AssignmentResult(groups=groups, metrics=metrics)
