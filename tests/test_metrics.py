# tests/test_metrics.py
from groupmaker.domain.models import Annotations, EngineConfig, Gender, Group, Person
from groupmaker.domain.metrics import compute_metrics

A = Person(id=1, name="A", friends=["B"], keep_apart=["D"])
B = Person(id=2, name="B", friends=["A"])
C = Person(id=3, name="C", gender=Gender.GIRL, friends=["D", "Zed"])
D = Person(id=4, name="D", gender=Gender.GIRL)
ROSTER = [A, B, C, D]
NOTES = Annotations.from_maps({(2, "A"): 3}, {3: {"A"}})


def test_counts_each_pair_once():
    groups = [Group(id=1, target_size=2, members=[A, B]), Group(id=2, target_size=2, members=[C, D])]
    m = compute_metrics(groups, ROSTER, NOTES)
    assert m.friend_pairs_satisfied == 2
    assert m.priority_score == 3 + 1
    assert m.keep_apart_violations == 0
    assert m.must_together_violations == 1
    assert m.capacity_overflow == 0
    assert m.unresolved_references == 1
    assert m.gender_imbalance is None


def test_reports_violations_and_overflow():
    groups = [Group(id=1, target_size=2, members=[A, C, D]), Group(id=2, target_size=2, members=[B])]
    m = compute_metrics(groups, ROSTER, NOTES, EngineConfig(balance_by_gender=True))
    assert m.friend_pairs_satisfied == 1
    assert m.keep_apart_violations == 1
    assert m.must_together_violations == 0
    assert m.capacity_overflow == 1
    assert m.gender_imbalance == 1 + 1


def test_metrics_are_idempotent_and_read_only():
    groups = [Group(id=1, target_size=4, members=[A, B, C, D])]
    before = [g.model_copy(deep=True) for g in groups]
    first = compute_metrics(groups, ROSTER, NOTES)
    second = compute_metrics(groups, ROSTER, NOTES)
    assert first == second
    assert groups == before


def test_empty_groups():
    groups = [Group(id=1, target_size=3), Group(id=2, target_size=3)]
    m = compute_metrics(groups, ROSTER)
    assert m.friend_pairs_satisfied == 0
    assert m.keep_apart_violations == 0
