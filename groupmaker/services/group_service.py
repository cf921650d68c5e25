import logging
from typing import List, Optional, Sequence

from groupmaker.config.settings import settings
from groupmaker.domain.grouping import assign_groups
from groupmaker.domain.metrics import compute_metrics
from groupmaker.domain.models import (
    Annotations,
    AssignmentResult,
    EngineConfig,
    Group,
    GroupSpec,
    Metrics,
    Person,
    PersonId,
)

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig.from_settings(settings)

    @staticmethod
    def build_group_specs(num_groups: int, sizes: Optional[Sequence[int]] = None, default_size: Optional[int] = None) -> List[GroupSpec]:
        """
        Group layout for `num_groups` groups. Existing sizes are kept where
        possible, new slots get the default size.
        """
        if default_size is None:
            default_size = settings.GROUP_SIZE_DEFAULT
        current = list(sizes or [])
        return [
            GroupSpec(target_size=current[i] if i < len(current) else default_size)
            for i in range(num_groups)
        ]

    @staticmethod
    def total_target_size(group_specs: Sequence[GroupSpec]) -> int:
        return sum(spec.target_size for spec in group_specs)

    def assign(
        self,
        roster: Sequence[Person],
        group_specs: Sequence[GroupSpec],
        annotations: Optional[Annotations] = None,
        **overrides,
    ) -> AssignmentResult:
        config = self.config.with_overrides(**overrides)
        capacity = self.total_target_size(group_specs)
        if capacity < len(roster):
            logger.warning(f"Total capacity {capacity} is below roster size {len(roster)}; groups will go over target")

        result = assign_groups(roster, group_specs, annotations, config)

        metrics = result.metrics
        if metrics.keep_apart_violations or metrics.must_together_violations:
            logger.warning(
                f"Could not honour every constraint: {metrics.keep_apart_violations} keep-apart, "
                f"{metrics.must_together_violations} must-together violations"
            )
        return result

    def score(
        self,
        groups: Sequence[Group],
        roster: Sequence[Person],
        annotations: Optional[Annotations] = None,
        **overrides,
    ) -> Metrics:
        return compute_metrics(groups, roster, annotations, self.config.with_overrides(**overrides))

    @staticmethod
    def groups_from_ids(roster: Sequence[Person], layout: Sequence[dict]) -> List[Group]:
        """
        Rebuild groups from {"id", "target_size", "member_ids"} entries, e.g.
        after a caller edited a partition by hand.
        """
        by_id = {p.id: p for p in roster}
        seen = set()
        groups = []
        for entry in layout:
            members = []
            for person_id in entry["member_ids"]:
                if person_id not in by_id:
                    raise ValueError(f"Unknown person id {person_id!r}")
                if person_id in seen:
                    raise ValueError(f"Person {person_id!r} appears in more than one group")
                seen.add(person_id)
                members.append(by_id[person_id])
            groups.append(Group(id=entry["id"], target_size=entry["target_size"], members=members))
        missing = [p.id for p in roster if p.id not in seen]
        if missing:
            raise ValueError(f"People missing from the layout: {missing!r}")
        return groups

    def move_member(
        self,
        result: AssignmentResult,
        person_id: PersonId,
        target_group_id: int,
        roster: Sequence[Person],
        annotations: Optional[Annotations] = None,
        **overrides,
    ) -> AssignmentResult:
        """Return a new result with one person moved and the metrics recomputed."""
        if not any(g.id == target_group_id for g in result.groups):
            raise ValueError("Group not found")
        person = next((m for g in result.groups for m in g.members if m.id == person_id), None)
        if person is None:
            raise ValueError("Person not in any group")

        groups = []
        for g in result.groups:
            members = [m for m in g.members if m.id != person_id]
            if g.id == target_group_id:
                members.append(person)
            groups.append(g.model_copy(update={"members": members}))

        return AssignmentResult(groups=groups, metrics=compute_metrics(groups, roster, annotations, self.config.with_overrides(**overrides)))
