# tests/test_scoring.py
import pytest

from groupmaker.domain.models import EngineConfig, Gender, Person
from groupmaker.domain.relationships import RelationshipIndex
from groupmaker.domain.scoring import choose_group, gender_imbalance, has_conflict, score_placement

ALICE = Person(id=1, name="Alice", friends=["Bob"])
BOB = Person(id=2, name="Bob")
CARA = Person(id=3, name="Cara", gender=Gender.GIRL, keep_apart=["Alice"])
DAN = Person(id=4, name="Dan")

INDEX = RelationshipIndex([ALICE, BOB, CARA, DAN])
CONFIG = EngineConfig()


# -------------------------------
# Eligibility
# -------------------------------

def test_full_group_is_ineligible():
    assert score_placement((BOB,), [ALICE, DAN], 2, INDEX, CONFIG, phase=1) is None


def test_full_group_is_eligible_when_capacity_relaxed():
    score = score_placement((BOB,), [ALICE, DAN], 2, INDEX, CONFIG, phase=2, enforce_capacity=False)
    assert score == pytest.approx(100 - 50)


def test_keep_apart_is_ineligible_even_when_capacity_relaxed():
    assert score_placement((CARA,), [ALICE], 4, INDEX, CONFIG, phase=2) is None
    assert score_placement((CARA,), [ALICE], 4, INDEX, CONFIG, phase=2, enforce_capacity=False) is None
    assert has_conflict((DAN, CARA), [BOB, ALICE], INDEX)


# -------------------------------
# Score terms
# -------------------------------

def test_empty_group_scores_zero():
    assert score_placement((DAN,), [], 3, INDEX, CONFIG, phase=2) == 0


def test_friend_bonus_uses_phase_weight():
    assert score_placement((BOB,), [ALICE], 2, INDEX, CONFIG, phase=1) == pytest.approx(150 - 25)
    assert score_placement((BOB,), [ALICE], 2, INDEX, CONFIG, phase=2) == pytest.approx(100 - 25)


def test_space_penalty_grows_with_occupancy():
    half = score_placement((DAN,), [BOB], 2, INDEX, CONFIG, phase=2)
    third = score_placement((DAN,), [BOB], 3, INDEX, CONFIG, phase=2)
    assert half < third < 0


def test_gender_balance_rewards_reducing_imbalance():
    config = EngineConfig(balance_by_gender=True)
    girl_into_boys = score_placement((CARA,), [BOB], 4, INDEX, config, phase=2)
    boy_into_boys = score_placement((DAN,), [BOB], 4, INDEX, config, phase=2)
    assert girl_into_boys == pytest.approx(-12.5 + 20)
    assert boy_into_boys == pytest.approx(-12.5 - 20)


def test_unit_scores_every_pair():
    score = score_placement((BOB, DAN), [ALICE], 4, INDEX, CONFIG, phase=0)
    assert score == pytest.approx(150 - 12.5)


# -------------------------------
# Helpers
# -------------------------------

def test_choose_group_prefers_lowest_index_on_ties():
    assert choose_group([None, 5.0, 5.0, 3.0]) == 1
    assert choose_group([0.0, 0.0]) == 0
    assert choose_group([None, None]) is None


def test_gender_imbalance_ignores_other():
    people = [
        Person(id=1, name="a", gender=Gender.BOY),
        Person(id=2, name="b", gender=Gender.BOY),
        Person(id=3, name="c", gender=Gender.GIRL),
        Person(id=4, name="d", gender=Gender.OTHER),
    ]
    assert gender_imbalance(people) == 1
    assert gender_imbalance([]) == 0
