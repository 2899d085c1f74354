"""Task Domain Model

Task 持有当前 status；状态变更的历史由 task_history 表追加记录。
TaskDraft / TaskPatch / TaskFilters 为生命周期引擎的输入类型，
形状校验由 gateway 请求模型负责，此处不重复校验。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import TaskPriority, TaskStatus


class Task(BaseModel):
    """Task 数据模型

    不变量：assigned_to 若存在，指派时必须是 team_id 的成员；
    team_id 变更时 assigned_to 被清空。
    """

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority = Field(description="优先级")
    team_id: str = Field(description="所属团队 ID")
    assigned_to: str | None = Field(default=None, description="被指派用户 ID")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")


class TaskDraft(BaseModel):
    """创建任务输入"""

    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority
    team_id: str


class TaskPatch(BaseModel):
    """更新任务输入 -- 仅 model_fields_set 中的字段被视为"出现"

    不包含 assigned_to：指派只能通过 assign 操作完成。
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    team_id: str | None = None

    def changes(self) -> dict:
        """返回调用方显式提供的字段；除 description 外，显式 None 视为未提供"""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }


class TaskFilters(BaseModel):
    """任务列表筛选条件，缺省字段不参与过滤，各字段 AND 组合"""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    team_id: str | None = None
    assigned_to: str | None = None
