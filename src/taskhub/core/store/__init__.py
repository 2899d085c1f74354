"""TaskHub Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from .history_store import SqliteTaskHistoryStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .team_store import SqliteMembershipStore, SqliteTeamStore
from .transaction import read_snapshot, unit_of_work, update_task_with_history
from .user_store import SqliteUserStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接与同一把事务锁"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.lock = asyncio.Lock()
        self.user_store = SqliteUserStore(conn)
        self.team_store = SqliteTeamStore(conn)
        self.membership_store = SqliteMembershipStore(conn)
        self.task_store = SqliteTaskStore(conn)
        self.history_store = SqliteTaskHistoryStore(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["StoreGroup"]:
        """原子写单元：退出时提交，异常时回滚"""
        async with unit_of_work(self.conn, self.lock):
            yield self

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator["StoreGroup"]:
        """一致性读：不与进行中的写单元交错"""
        async with read_snapshot(self.lock):
            yield self

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteUserStore",
    "SqliteTeamStore",
    "SqliteMembershipStore",
    "SqliteTaskStore",
    "SqliteTaskHistoryStore",
    "init_db",
    "unit_of_work",
    "read_snapshot",
    "update_task_with_history",
]
