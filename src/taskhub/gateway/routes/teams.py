"""团队路由 -- 仅 admin

POST   /teams             创建团队
GET    /teams             团队列表
PATCH  /teams/{team_id}   编辑团队
DELETE /teams/{team_id}   删除团队
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from taskhub.core.models import Team, UserRole

from ..deps import get_store_group, require_role
from ..services.team_service import TeamService

router = APIRouter(dependencies=[Depends(require_role(UserRole.ADMIN))])


class TeamCreateRequest(BaseModel):
    """创建团队请求体"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, description="团队名称")
    description: str | None = Field(default=None, description="团队描述")


class TeamEditRequest(BaseModel):
    """编辑团队请求体"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None


@router.post("/teams", status_code=201, response_model=Team)
async def create_team(body: TeamCreateRequest, store_group=Depends(get_store_group)):
    """创建团队"""
    return await TeamService(store_group).create_team(body.name, body.description)


@router.get("/teams", response_model=list[Team])
async def list_teams(store_group=Depends(get_store_group)):
    """查询全部团队"""
    return await TeamService(store_group).list_teams()


@router.patch("/teams/{team_id}", response_model=Team)
async def edit_team(
    team_id: str,
    body: TeamEditRequest,
    store_group=Depends(get_store_group),
):
    """编辑团队"""
    return await TeamService(store_group).edit_team(team_id, body.name, body.description)


@router.delete("/teams/{team_id}")
async def delete_team(team_id: str, store_group=Depends(get_store_group)):
    """删除团队"""
    await TeamService(store_group).delete_team(team_id)
    return {"message": "Team deleted successfully."}
