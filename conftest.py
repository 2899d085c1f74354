"""全局 pytest 配置 -- 临时 SQLite 数据库 + 数据准备 fixture"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest_asyncio

# bcrypt 最小 cost，加快测试
os.environ.setdefault("TASKHUB_PASSWORD_HASH_ROUNDS", "4")

from taskhub.core.models import (  # noqa: E402
    Task,
    TaskPriority,
    TaskStatus,
    Team,
    TeamMembership,
    User,
    UserRole,
)
from taskhub.core.security import hash_password  # noqa: E402
from taskhub.core.store import StoreGroup, create_store_group  # noqa: E402
from ulid import ULID  # noqa: E402

DEFAULT_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from taskhub.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供临时 StoreGroup"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.close()


class Seeder:
    """直接通过 store 写入测试数据，绕过服务层校验"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group
        self._counter = 0

    async def user(
        self,
        role: UserRole = UserRole.MEMBER,
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        self._counter += 1
        now = datetime.now(UTC)
        user = User(
            id=str(ULID()),
            name=name or f"User {self._counter}",
            email=email or f"user{self._counter}@example.com",
            password_hash=hash_password(password),
            role=role,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction() as stores:
            await stores.user_store.create_user(user)
        return user

    async def team(self, name: str | None = None) -> Team:
        self._counter += 1
        now = datetime.now(UTC)
        team = Team(
            id=str(ULID()),
            name=name or f"Team {self._counter}",
            description="测试团队",
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction() as stores:
            await stores.team_store.create_team(team)
        return team

    async def member(self, team: Team, user: User) -> None:
        async with self._stores.transaction() as stores:
            await stores.membership_store.add_membership(
                TeamMembership(user_id=user.id, team_id=team.id, created_at=datetime.now(UTC))
            )

    async def task(
        self,
        team: Team,
        status: TaskStatus = TaskStatus.PENDING,
        priority: TaskPriority = TaskPriority.LOW,
        assigned_to: User | None = None,
        title: str = "测试任务",
    ) -> Task:
        now = datetime.now(UTC)
        task = Task(
            id=str(ULID()),
            title=title,
            status=status,
            priority=priority,
            team_id=team.id,
            assigned_to=assigned_to.id if assigned_to else None,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction() as stores:
            await stores.task_store.create_task(task)
        return task


@pytest_asyncio.fixture
async def seed(store_group: StoreGroup) -> Seeder:
    """测试数据准备器"""
    return Seeder(store_group)
