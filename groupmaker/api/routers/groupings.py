# groupmaker/api/routers/groupings.py
"""
Grouping endpoints: run the assignment engine on a roster, re-score an
edited partition.
"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from groupmaker.config.settings import settings
from groupmaker.domain.models import Annotations, AssignmentResult, GroupSpec, Metrics, Person, PersonId
from groupmaker.services.group_service import GroupService

router = APIRouter()


class AssignReq(BaseModel):
    roster: List[Person]
    groups: Optional[List[GroupSpec]] = None
    num_groups: Optional[int] = None
    group_size: Optional[int] = None
    annotations: Annotations = Field(default_factory=Annotations)
    balance_by_gender: bool = False
    rebalance_rounds: Optional[int] = None


class GroupLayout(BaseModel):
    id: int
    target_size: int
    member_ids: List[PersonId] = Field(default_factory=list)


class ScoreReq(BaseModel):
    roster: List[Person]
    groups: List[GroupLayout]
    annotations: Annotations = Field(default_factory=Annotations)
    balance_by_gender: bool = False


@router.post("/assign", response_model=AssignmentResult, summary="Assign a roster into groups")
def assign(req: AssignReq):
    service = GroupService()
    specs = req.groups
    if specs is None:
        num_groups = req.num_groups if req.num_groups is not None else settings.NUM_GROUPS_DEFAULT
        specs = service.build_group_specs(num_groups, default_size=req.group_size)

    overrides = {"balance_by_gender": req.balance_by_gender}
    if req.rebalance_rounds is not None:
        overrides["rebalance_rounds"] = req.rebalance_rounds

    try:
        return service.assign(req.roster, specs, req.annotations, **overrides)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/score", response_model=Metrics, summary="Compute metrics for an edited partition")
def score(req: ScoreReq):
    service = GroupService()
    try:
        groups = service.groups_from_ids(req.roster, [g.model_dump() for g in req.groups])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return service.score(groups, req.roster, req.annotations, balance_by_gender=req.balance_by_gender)
