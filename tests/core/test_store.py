"""Store 单元测试

测试内容：
1. 成员关系按 user_id 唯一
2. 任务筛选 AND 组合
3. 历史记录倒序读取并联表操作者
4. 删除带历史的任务不受阻
5. 外键：删除仍有任务的团队被拒绝
"""

from datetime import UTC, datetime, timedelta

import aiosqlite
import pytest
from taskhub.core.models import (
    TaskFilters,
    TaskHistoryEntry,
    TaskPriority,
    TaskStatus,
    TeamMembership,
)
from taskhub.core.store.sqlite_init import verify_wal_mode


class TestSqliteInit:
    async def test_wal_mode_enabled(self, db_conn):
        """初始化后启用 WAL"""
        assert await verify_wal_mode(db_conn) is True


class TestMembershipStore:
    """成员关系存储测试"""

    async def test_second_membership_violates_primary_key(self, store_group, seed):
        """同一用户第二次写入成员关系触发主键冲突"""
        team_a = await seed.team()
        team_b = await seed.team()
        user = await seed.user()
        await seed.member(team_a, user)

        with pytest.raises(aiosqlite.IntegrityError):
            async with store_group.transaction() as stores:
                await stores.membership_store.add_membership(
                    TeamMembership(
                        user_id=user.id,
                        team_id=team_b.id,
                        created_at=datetime.now(UTC),
                    )
                )

        membership = await store_group.membership_store.get_membership(user.id)
        assert membership is not None
        assert membership.team_id == team_a.id

    async def test_list_members_joins_user(self, store_group, seed):
        team = await seed.team()
        user = await seed.user(name="Bob")
        await seed.member(team, user)

        members = await store_group.membership_store.list_members(team.id)
        assert [m.name for m in members] == ["Bob"]
        assert members[0].email == user.email

    async def test_deleting_user_cascades_membership(self, store_group, seed):
        team = await seed.team()
        user = await seed.user()
        await seed.member(team, user)

        async with store_group.transaction() as stores:
            await stores.user_store.delete_user(user.id)

        assert await store_group.membership_store.get_membership(user.id) is None


class TestTaskStore:
    """任务存储测试"""

    async def test_list_filters_are_anded(self, store_group, seed):
        team_a = await seed.team()
        team_b = await seed.team()
        await seed.task(team_a, status=TaskStatus.PENDING, priority=TaskPriority.HIGH)
        await seed.task(team_a, status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH)
        await seed.task(team_b, status=TaskStatus.PENDING, priority=TaskPriority.HIGH)

        tasks = await store_group.task_store.list_tasks(
            TaskFilters(team_id=team_a.id, status=TaskStatus.PENDING)
        )
        assert len(tasks) == 1
        assert tasks[0].team_id == team_a.id
        assert tasks[0].status == TaskStatus.PENDING

    async def test_list_without_filters_returns_all(self, store_group, seed):
        team = await seed.team()
        await seed.task(team)
        await seed.task(team)
        assert len(await store_group.task_store.list_tasks()) == 2

    async def test_filter_by_assignee(self, store_group, seed):
        team = await seed.team()
        user = await seed.user()
        await seed.member(team, user)
        assigned = await seed.task(team, assigned_to=user)
        await seed.task(team)

        tasks = await store_group.task_store.list_tasks(TaskFilters(assigned_to=user.id))
        assert [t.id for t in tasks] == [assigned.id]

    async def test_delete_team_with_tasks_rejected(self, store_group, seed):
        """团队删除不级联任务：外键拒绝"""
        team = await seed.team()
        await seed.task(team)

        with pytest.raises(aiosqlite.IntegrityError):
            async with store_group.transaction() as stores:
                await stores.team_store.delete_team(team.id)


class TestHistoryStore:
    """历史存储测试"""

    async def test_history_newest_first_with_user(self, store_group, seed):
        team = await seed.team()
        user = await seed.user(name="Carol")
        task = await seed.task(team)
        base = datetime.now(UTC)

        async with store_group.transaction() as stores:
            await stores.history_store.append_entry(
                TaskHistoryEntry(
                    id="01JHIST0000000000000000001",
                    task_id=task.id,
                    changed_by=user.id,
                    previous_status=TaskStatus.PENDING,
                    new_status=TaskStatus.IN_PROGRESS,
                    changed_at=base,
                )
            )
            await stores.history_store.append_entry(
                TaskHistoryEntry(
                    id="01JHIST0000000000000000002",
                    task_id=task.id,
                    changed_by=user.id,
                    previous_status=TaskStatus.IN_PROGRESS,
                    new_status=TaskStatus.COMPLETED,
                    changed_at=base + timedelta(seconds=1),
                )
            )

        history = await store_group.history_store.list_for_task(task.id)
        assert [h.new_status for h in history] == [
            TaskStatus.COMPLETED,
            TaskStatus.IN_PROGRESS,
        ]
        assert history[0].user is not None
        assert history[0].user.name == "Carol"

    async def test_delete_task_keeps_history(self, store_group, seed):
        """删除任务不受历史记录阻塞，历史保留"""
        team = await seed.team()
        user = await seed.user()
        task = await seed.task(team)

        async with store_group.transaction() as stores:
            await stores.history_store.append_entry(
                TaskHistoryEntry(
                    id="01JHIST0000000000000000003",
                    task_id=task.id,
                    changed_by=user.id,
                    previous_status=TaskStatus.PENDING,
                    new_status=TaskStatus.COMPLETED,
                    changed_at=datetime.now(UTC),
                )
            )

        async with store_group.transaction() as stores:
            await stores.task_store.delete_task(task.id)

        assert await store_group.task_store.get_task(task.id) is None
        assert await store_group.history_store.count_for_task(task.id) == 1

    async def test_history_of_deleted_user_has_no_user_ref(self, store_group, seed):
        team = await seed.team()
        user = await seed.user()
        task = await seed.task(team)

        async with store_group.transaction() as stores:
            await stores.history_store.append_entry(
                TaskHistoryEntry(
                    id="01JHIST0000000000000000004",
                    task_id=task.id,
                    changed_by=user.id,
                    previous_status=TaskStatus.PENDING,
                    new_status=TaskStatus.IN_PROGRESS,
                    changed_at=datetime.now(UTC),
                )
            )
            await stores.user_store.delete_user(user.id)

        history = await store_group.history_store.list_for_task(task.id)
        assert len(history) == 1
        assert history[0].user is None
        # 操作者 ID 随记录保留
        assert history[0].changed_by == user.id
