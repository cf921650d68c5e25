# groupmaker/domain/models.py
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

PersonId = Union[int, str]


class Gender(str, Enum):
    BOY = "boy"
    GIRL = "girl"
    OTHER = "other"


class Precedence(str, Enum):
    """Which constraint wins when a pair is both must-together and keep-apart."""
    MUST_TOGETHER = "must_together"
    KEEP_APART = "keep_apart"


class Person(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: PersonId
    name: str
    gender: Gender = Gender.BOY
    friends: List[str] = Field(default_factory=list)
    keep_apart: List[str] = Field(default_factory=list)


class FriendshipAnnotation(BaseModel):
    person_id: PersonId
    friend_name: str
    priority: int = Field(default=1, ge=1)
    must_be_together: bool = False


class Annotations(BaseModel):
    friendships: List[FriendshipAnnotation] = Field(default_factory=list)

    @classmethod
    def from_maps(
        cls,
        priorities: Optional[Mapping[Tuple[PersonId, str], int]] = None,
        must_be_together: Optional[Mapping[PersonId, Iterable[str]]] = None,
    ) -> "Annotations":
        """
        Build annotations from the two map shapes callers usually keep:
        priorities keyed by (person_id, friend_name) and must-together
        names keyed by person_id.

        >>> Annotations.from_maps({(1, "Bob"): 3}, {1: {"Bob"}}).friendships[0].priority
        3
        """
        merged: Dict[Tuple[PersonId, str], FriendshipAnnotation] = {}
        for (person_id, friend_name), priority in (priorities or {}).items():
            merged[(person_id, friend_name)] = FriendshipAnnotation(
                person_id=person_id, friend_name=friend_name, priority=priority
            )
        for person_id, names in (must_be_together or {}).items():
            for friend_name in sorted(names):
                key = (person_id, friend_name)
                if key in merged:
                    merged[key] = merged[key].model_copy(update={"must_be_together": True})
                else:
                    merged[key] = FriendshipAnnotation(
                        person_id=person_id, friend_name=friend_name, must_be_together=True
                    )
        return cls(friendships=list(merged.values()))


class GroupSpec(BaseModel):
    target_size: int


class Group(BaseModel):
    id: int
    target_size: int
    members: List[Person] = Field(default_factory=list)


class Metrics(BaseModel):
    friend_pairs_satisfied: int = 0
    priority_score: int = 0
    must_together_violations: int = 0
    keep_apart_violations: int = 0
    gender_imbalance: Optional[int] = None
    capacity_overflow: int = 0
    unresolved_references: int = 0


class AssignmentResult(BaseModel):
    groups: List[Group]
    metrics: Metrics


class EngineConfig(BaseModel):
    """
    Tunables for one engine run. Passed explicitly into every call so the
    engine never reads ambient state.

    friend_weights holds the friend bonus multiplier for phase 0, 1 and 2.
    """
    model_config = ConfigDict(frozen=True)

    balance_by_gender: bool = False
    friend_weights: Tuple[float, float, float] = (150.0, 150.0, 100.0)
    space_penalty: float = 50.0
    gender_weight: float = 20.0
    keep_apart_weight: float = 1000.0
    max_friends: Optional[int] = Field(default=None, ge=0)
    max_keep_apart: Optional[int] = Field(default=None, ge=0)
    precedence: Precedence = Precedence.MUST_TOGETHER
    rebalance_rounds: int = Field(default=0, ge=0)

    @classmethod
    def from_settings(cls, settings, **overrides) -> "EngineConfig":
        values = {
            "friend_weights": tuple(settings.FRIEND_WEIGHTS),
            "space_penalty": settings.SPACE_PENALTY,
            "gender_weight": settings.GENDER_WEIGHT,
            "keep_apart_weight": settings.KEEP_APART_WEIGHT,
            "max_friends": settings.MAX_FRIENDS,
            "max_keep_apart": settings.MAX_KEEP_APART,
            "precedence": settings.PRECEDENCE,
            "rebalance_rounds": settings.REBALANCE_ROUNDS,
        }
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides) -> "EngineConfig":
        if not overrides:
            return self
        return EngineConfig(**{**self.model_dump(), **overrides})
