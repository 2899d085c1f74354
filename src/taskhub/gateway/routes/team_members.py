"""团队成员路由

POST   /team-members            加入团队（admin）
GET    /team-members?team_id=   成员列表（已认证）
DELETE /team-members            移出团队（admin）
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from taskhub.core.models import Principal, TeamMember, TeamMembership, UserRole

from ..deps import get_store_group, require_principal, require_role
from ..services.membership_service import MembershipService

router = APIRouter()


class TeamMemberRequest(BaseModel):
    """成员关系请求体"""

    user_id: str = Field(min_length=1, description="用户 ID")
    team_id: str = Field(min_length=1, description="团队 ID")


@router.post("/team-members", status_code=201, response_model=TeamMembership)
async def add_team_member(
    body: TeamMemberRequest,
    _: Principal = Depends(require_role(UserRole.ADMIN)),
    store_group=Depends(get_store_group),
):
    """将用户加入团队；用户已有团队时返回 409"""
    return await MembershipService(store_group).add_member(body.team_id, body.user_id)


@router.get("/team-members", response_model=list[TeamMember])
async def list_team_members(
    team_id: str = Query(description="团队 ID"),
    _: Principal = Depends(require_principal),
    store_group=Depends(get_store_group),
):
    """查询团队成员，按角色排序"""
    return await MembershipService(store_group).list_members(team_id)


@router.delete("/team-members")
async def remove_team_member(
    body: TeamMemberRequest,
    _: Principal = Depends(require_role(UserRole.ADMIN)),
    store_group=Depends(get_store_group),
):
    """将用户移出团队"""
    await MembershipService(store_group).remove_member(body.team_id, body.user_id)
    return {"message": "Team member deleted successfully."}
