"""任务路由

POST   /tasks                       创建任务
GET    /tasks                       任务列表，支持 status/priority/team_id/assigned_to 筛选
PATCH  /tasks/{task_id}             更新任务（admin 或被指派人）
PATCH  /tasks/{task_id}/assign      指派任务（admin/manager 或被指派人）
DELETE /tasks/{task_id}             删除任务（admin 或被指派人）
GET    /tasks/{task_id}/history     状态变更历史
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import JSONResponse
from taskhub.core.models import (
    Principal,
    Task,
    TaskDraft,
    TaskFilters,
    TaskHistoryView,
    TaskPatch,
    TaskPriority,
    TaskStatus,
    UserRole,
)

from ..deps import (
    get_store_group,
    require_principal,
    require_role_or_assignment,
)
from ..services.task_service import TaskService

router = APIRouter()


class TaskCreateRequest(BaseModel):
    """创建任务请求体"""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="初始状态")
    priority: TaskPriority = Field(description="优先级")
    team_id: str = Field(min_length=1, description="所属团队 ID")


class TaskUpdateRequest(BaseModel):
    """更新任务请求体 -- 未知字段（如 assigned_to）被忽略"""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    team_id: str | None = Field(default=None, min_length=1)


class TaskAssignRequest(BaseModel):
    """指派任务请求体"""

    assigned_to: str = Field(min_length=1, description="被指派用户 ID")


class MessageResponse(BaseModel):
    """操作结果消息"""

    message: str


@router.post("/tasks", status_code=201, response_model=Task)
async def create_task(
    body: TaskCreateRequest,
    _: Principal = Depends(require_principal),
    store_group=Depends(get_store_group),
):
    """创建任务"""
    service = TaskService(store_group)
    return await service.create_task(TaskDraft(**body.model_dump()))


@router.get("/tasks", response_model=list[Task])
async def list_tasks(
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    priority: TaskPriority | None = Query(default=None, description="按优先级筛选"),
    team_id: str | None = Query(default=None, description="按团队筛选"),
    assigned_to: str | None = Query(default=None, description="按被指派人筛选"),
    _: Principal = Depends(require_principal),
    store_group=Depends(get_store_group),
):
    """查询任务列表，筛选条件 AND 组合"""
    service = TaskService(store_group)
    return await service.list_tasks(
        TaskFilters(
            status=status,
            priority=priority,
            team_id=team_id,
            assigned_to=assigned_to,
        )
    )


@router.patch("/tasks/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    principal: Principal = Depends(require_role_or_assignment(UserRole.ADMIN)),
    store_group=Depends(get_store_group),
):
    """更新任务；status 变化时写入历史"""
    service = TaskService(store_group)
    patch = TaskPatch(**body.model_dump(exclude_unset=True))
    return await service.update_task(task_id, principal, patch)


@router.patch("/tasks/{task_id}/assign", response_model=Task)
async def assign_task(
    task_id: str,
    body: TaskAssignRequest,
    _: Principal = Depends(
        require_role_or_assignment(UserRole.ADMIN, UserRole.MANAGER)
    ),
    store_group=Depends(get_store_group),
):
    """指派任务给团队成员"""
    service = TaskService(store_group)
    return await service.assign_task(task_id, body.assigned_to)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    _: Principal = Depends(require_role_or_assignment(UserRole.ADMIN)),
    store_group=Depends(get_store_group),
):
    """删除任务"""
    service = TaskService(store_group)
    await service.delete_task(task_id)
    return JSONResponse(
        status_code=200,
        content=MessageResponse(message="Task deleted successfully.").model_dump(),
    )


@router.get("/tasks/{task_id}/history", response_model=list[TaskHistoryView])
async def get_task_history(
    task_id: str,
    _: Principal = Depends(require_principal),
    store_group=Depends(get_store_group),
):
    """查询任务状态变更历史，最新在前"""
    service = TaskService(store_group)
    return await service.get_history(task_id)
