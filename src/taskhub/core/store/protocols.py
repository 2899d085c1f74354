"""Store Protocol 接口定义

定义 TaskStore、TaskHistoryStore、MembershipStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing），便于测试替身。
"""

from typing import Protocol

from ..models.history import TaskHistoryEntry, TaskHistoryView
from ..models.task import Task, TaskFilters
from ..models.team import TeamMember, TeamMembership


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        ...

    async def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        """查询任务列表，支持多字段筛选"""
        ...

    async def update_task(self, task: Task) -> None:
        """单次写入任务的全部可变字段"""
        ...

    async def assign_task(self, task_id: str, assigned_to: str, updated_at: str) -> None:
        """设置任务的被指派人"""
        ...

    async def delete_task(self, task_id: str) -> None:
        """删除任务"""
        ...


class TaskHistoryStore(Protocol):
    """历史存储接口

    task_history 表 append-only：只允许插入，不允许更新或删除。
    """

    async def append_entry(self, entry: TaskHistoryEntry) -> None:
        """追加一条状态变更记录"""
        ...

    async def list_for_task(self, task_id: str) -> list[TaskHistoryView]:
        """查询任务的全部历史，最新在前"""
        ...


class MembershipStore(Protocol):
    """成员关系存储接口 -- 以 user_id 为唯一键"""

    async def add_membership(self, membership: TeamMembership) -> None:
        """写入成员关系"""
        ...

    async def get_membership(self, user_id: str) -> TeamMembership | None:
        """查询用户当前的团队归属"""
        ...

    async def list_members(self, team_id: str) -> list[TeamMember]:
        """查询团队成员"""
        ...

    async def delete_membership(self, user_id: str) -> None:
        """删除用户的成员关系"""
        ...
