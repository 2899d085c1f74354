"""TaskHistoryEntry Domain Model

task_history 表 append-only：只允许插入，不允许更新或删除。
仅当 update 提供了 status 且与当前存储值不同时才写入一条记录。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import TaskStatus
from .user import UserRef


class TaskHistoryEntry(BaseModel):
    """状态变更审计记录"""

    id: str = Field(description="唯一标识，ULID 格式")
    task_id: str = Field(description="关联的 Task ID")
    changed_by: str = Field(description="操作者用户 ID")
    previous_status: TaskStatus = Field(description="变更前状态")
    new_status: TaskStatus = Field(description="变更后状态")
    changed_at: datetime = Field(description="变更时间")


class TaskHistoryView(BaseModel):
    """历史查询结果 -- 附带操作者信息

    changed_by 随记录永久保留；操作者账号已删除时 user 为 None。
    """

    id: str
    task_id: str
    changed_by: str
    previous_status: TaskStatus
    new_status: TaskStatus
    changed_at: datetime
    user: UserRef | None = None
