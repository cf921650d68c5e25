# groupmaker/simulation/simulate.py
"""
Simulation script: builds a random class of children with friendships,
priorities, must-together pairs and keep-apart pairs, runs the grouping
engine and prints the result.

Uses the service layer directly (no HTTP calls).
"""
import logging
import random
from typing import List, Optional, Tuple

from faker import Faker

from groupmaker.config.settings import settings
from groupmaker.domain.models import Annotations, AssignmentResult, Gender, Person
from groupmaker.services.group_service import GroupService

NUM_CHILDREN = 24
NUM_GROUPS = 4
GROUP_SIZE = 6
FRIENDS_PER_CHILD = 2
KEEP_APART_CHANCE = 0.15
MUST_TOGETHER_PAIRS = 2


def build_roster(num_children: int = NUM_CHILDREN, seed: Optional[int] = None) -> Tuple[List[Person], Annotations]:
    rng = random.Random(seed)
    fake = Faker()
    fake.seed_instance(seed)

    names = []
    genders = []
    taken = set()
    while len(names) < num_children:
        gender = rng.choice([Gender.BOY, Gender.GIRL])
        first = fake.first_name_male() if gender == Gender.BOY else fake.first_name_female()
        name = f"{first} {fake.last_name()}"
        if name.casefold() in taken:
            continue
        taken.add(name.casefold())
        names.append(name)
        genders.append(gender)

    friends = []
    keep_apart = []
    for name in names:
        others = [n for n in names if n != name]
        chosen = rng.sample(others, min(FRIENDS_PER_CHILD, len(others)))
        friends.append(chosen)
        rivals = [n for n in others if n not in chosen]
        keep_apart.append([rng.choice(rivals)] if rivals and rng.random() < KEEP_APART_CHANCE else [])

    roster = [
        Person(id=i + 1, name=name, gender=genders[i], friends=friends[i], keep_apart=keep_apart[i])
        for i, name in enumerate(names)
    ]

    priorities = {}
    for person in roster:
        for friend in person.friends:
            priority = rng.randint(1, 3)
            if priority > 1:
                priorities[(person.id, friend)] = priority

    must_together = {}
    linked = 0
    for person in rng.sample(roster, len(roster)):
        if linked >= MUST_TOGETHER_PAIRS:
            break
        if not person.friends:
            continue
        must_together[person.id] = {person.friends[0]}
        linked += 1

    return roster, Annotations.from_maps(priorities, must_together)


def run_simulation(seed: Optional[int] = None, balance_by_gender: bool = True) -> AssignmentResult:
    roster, annotations = build_roster(NUM_CHILDREN, seed)
    service = GroupService()
    specs = service.build_group_specs(NUM_GROUPS, default_size=GROUP_SIZE)
    result = service.assign(roster, specs, annotations, balance_by_gender=balance_by_gender)

    for group in result.groups:
        names = ", ".join(f"{p.name} ({p.gender.value})" for p in group.members)
        print(f"Group {group.id} [{len(group.members)}/{group.target_size}]: {names}")

    m = result.metrics
    print(f"Friend pairs together: {m.friend_pairs_satisfied} (priority score {m.priority_score})")
    print(f"Must-together violations: {m.must_together_violations}")
    print(f"Keep-apart violations: {m.keep_apart_violations}")
    if m.gender_imbalance is not None:
        print(f"Gender imbalance: {m.gender_imbalance}")
    return result


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    run_simulation()
