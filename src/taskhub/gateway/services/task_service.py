"""TaskService -- 任务生命周期引擎

负责任务的创建/列表/指派/更新/历史/删除：
1. 校验业务不变量（团队存在、被指派人是团队成员）
2. 判断状态变更是否需要审计
3. 在同一事务内提交任务写入与历史写入
"""

from datetime import UTC, datetime

import structlog
from taskhub.core.errors import (
    InvalidStateError,
    NotFoundError,
    NotTeamMemberError,
    UnauthenticatedError,
)
from taskhub.core.models import (
    Principal,
    Task,
    TaskDraft,
    TaskFilters,
    TaskHistoryEntry,
    TaskHistoryView,
    TaskPatch,
)
from taskhub.core.store import StoreGroup, update_task_with_history
from ulid import ULID

from .membership_service import is_member

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def create_task(self, draft: TaskDraft) -> Task:
        """创建任务（不产生历史记录）

        Raises:
            NotFoundError: team_id 不存在
        """
        now = datetime.now(UTC)
        task = Task(
            id=str(ULID()),
            title=draft.title,
            description=draft.description,
            status=draft.status,
            priority=draft.priority,
            team_id=draft.team_id,
            created_at=now,
            updated_at=now,
        )

        async with self._stores.transaction() as stores:
            if await stores.team_store.get_team(draft.team_id) is None:
                raise NotFoundError("Team not found.")
            await stores.task_store.create_task(task)

        log.info("task_created", task_id=task.id, team_id=task.team_id)
        return task

    async def get_task(self, task_id: str) -> Task | None:
        """查询任务详情"""
        async with self._stores.snapshot() as stores:
            return await stores.task_store.get_task(task_id)

    async def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        """查询任务列表"""
        async with self._stores.snapshot() as stores:
            return await stores.task_store.list_tasks(filters)

    async def assign_task(self, task_id: str, assigned_to: str) -> Task:
        """指派任务（不产生历史记录）

        成员资格检查与写入在同一事务内完成。

        Raises:
            NotFoundError: 任务或用户不存在
            NotTeamMemberError: 用户不是任务所属团队的成员
        """
        async with self._stores.transaction() as stores:
            task = await stores.task_store.get_task(task_id)
            if task is None:
                raise NotFoundError("Task not found.")
            if await stores.user_store.get_user(assigned_to) is None:
                raise NotFoundError("User not found.")
            if not await is_member(stores.membership_store, task.team_id, assigned_to):
                raise NotTeamMemberError()

            now = datetime.now(UTC)
            await stores.task_store.assign_task(task_id, assigned_to, now.isoformat())
            task = task.model_copy(update={"assigned_to": assigned_to, "updated_at": now})

        log.info("task_assigned", task_id=task_id, assigned_to=assigned_to)
        return task

    async def update_task(
        self,
        task_id: str,
        principal: Principal | None,
        patch: TaskPatch,
    ) -> Task:
        """更新任务

        - patch 中出现的字段一次性写入
        - team_id 变更为其他团队时清空 assigned_to
        - status 出现且不同于原状态时，同一事务内追加一条历史记录

        Args:
            task_id: 任务 ID
            principal: 操作者，记录为 changed_by
            patch: 更新内容

        Returns:
            更新后的 Task

        Raises:
            UnauthenticatedError: 未提供 principal
            InvalidStateError: 任务存在但 patch 为空
            NotFoundError: 任务或新团队不存在
        """
        if principal is None:
            raise UnauthenticatedError("User must be authenticated to change task status.")

        changes = patch.changes()

        async with self._stores.transaction() as stores:
            task = await stores.task_store.get_task(task_id)
            if task is None:
                raise NotFoundError("Task not found.")
            if not changes:
                raise InvalidStateError("At least one field must be provided to update.")

            previous_status = task.status
            now = datetime.now(UTC)
            updates = {**changes, "updated_at": now}

            new_team_id = changes.get("team_id")
            if new_team_id is not None and new_team_id != task.team_id:
                if await stores.team_store.get_team(new_team_id) is None:
                    raise NotFoundError("Team not found.")
                # 成员资格不随团队迁移
                updates["assigned_to"] = None

            updated = task.model_copy(update=updates)

            entry = None
            new_status = changes.get("status")
            if new_status is not None and new_status != previous_status:
                entry = TaskHistoryEntry(
                    id=str(ULID()),
                    task_id=task_id,
                    changed_by=principal.id,
                    previous_status=previous_status,
                    new_status=new_status,
                    changed_at=now,
                )

            await update_task_with_history(
                stores.task_store,
                stores.history_store,
                updated,
                entry,
            )

        if entry is not None:
            log.info(
                "task_status_changed",
                task_id=task_id,
                changed_by=principal.id,
                previous_status=previous_status.value,
                new_status=entry.new_status.value,
            )
        log.info("task_updated", task_id=task_id, fields=sorted(changes))
        return updated

    async def get_history(self, task_id: str) -> list[TaskHistoryView]:
        """查询任务状态变更历史，最新在前

        Raises:
            NotFoundError: 任务不存在
        """
        async with self._stores.snapshot() as stores:
            if await stores.task_store.get_task(task_id) is None:
                raise NotFoundError("Task not found.")
            return await stores.history_store.list_for_task(task_id)

    async def delete_task(self, task_id: str) -> None:
        """删除任务，历史记录保留

        Raises:
            NotFoundError: 任务不存在
        """
        async with self._stores.transaction() as stores:
            if await stores.task_store.get_task(task_id) is None:
                raise NotFoundError("Task not found.")
            await stores.task_store.delete_task(task_id)

        log.info("task_deleted", task_id=task_id)
