# tests/test_api.py
import httpx
import pytest
from httpx import ASGITransport

from groupmaker.main import app

pytestmark = pytest.mark.asyncio

BASE_URL = "http://test"

ROSTER = [
    {"id": 1, "name": "Alice", "gender": "boy", "friends": ["Bob"]},
    {"id": 2, "name": "Bob", "gender": "boy"},
    {"id": 3, "name": "Cara", "gender": "girl"},
]


def client():
    return httpx.AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL)


async def test_health():
    async with client() as ac:
        response = await ac.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_assign_roster():
    async with client() as ac:
        response = await ac.post("/api/v1/groupings/assign", json={
            "roster": ROSTER,
            "groups": [{"target_size": 2}, {"target_size": 1}],
        })
    assert response.status_code == 200
    data = response.json()
    assert [[m["name"] for m in g["members"]] for g in data["groups"]] == [["Alice", "Bob"], ["Cara"]]
    assert data["metrics"]["friend_pairs_satisfied"] == 1
    assert data["metrics"]["gender_imbalance"] is None


async def test_assign_with_group_count_and_annotations():
    async with client() as ac:
        response = await ac.post("/api/v1/groupings/assign", json={
            "roster": ROSTER,
            "num_groups": 2,
            "group_size": 2,
            "annotations": {"friendships": [{"person_id": 2, "friend_name": "Cara", "must_be_together": True}]},
            "balance_by_gender": True,
        })
    assert response.status_code == 200
    data = response.json()
    assert [g["target_size"] for g in data["groups"]] == [2, 2]
    assert data["metrics"]["must_together_violations"] == 0
    assert data["metrics"]["gender_imbalance"] is not None


@pytest.mark.parametrize("body", [
    {"roster": [], "groups": [{"target_size": 2}]},
    {"roster": ROSTER, "groups": []},
    {"roster": ROSTER, "num_groups": 0},
    {"roster": ROSTER, "groups": [{"target_size": 0}]},
])
async def test_assign_rejects_invalid_configuration(body):
    async with client() as ac:
        response = await ac.post("/api/v1/groupings/assign", json=body)
    assert response.status_code == 400


async def test_score_edited_partition():
    async with client() as ac:
        response = await ac.post("/api/v1/groupings/score", json={
            "roster": ROSTER,
            "groups": [
                {"id": 1, "target_size": 2, "member_ids": [1, 3]},
                {"id": 2, "target_size": 1, "member_ids": [2]},
            ],
        })
    assert response.status_code == 200
    assert response.json()["friend_pairs_satisfied"] == 0


async def test_score_rejects_unknown_member():
    async with client() as ac:
        response = await ac.post("/api/v1/groupings/score", json={
            "roster": ROSTER,
            "groups": [{"id": 1, "target_size": 2, "member_ids": [7]}],
        })
    assert response.status_code == 400


async def test_score_rejects_partial_layout():
    async with client() as ac:
        response = await ac.post("/api/v1/groupings/score", json={
            "roster": ROSTER,
            "groups": [{"id": 1, "target_size": 2, "member_ids": [1, 2]}],
        })
    assert response.status_code == 400
