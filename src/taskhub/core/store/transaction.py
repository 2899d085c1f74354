"""Task + History 原子事务封装

同一 SQLite 事务内提交任务更新和状态变更历史，
读者不会看到缺少历史记录的状态变更，反之亦然。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
import structlog

from ..errors import UnavailableError
from ..models.history import TaskHistoryEntry
from ..models.task import Task
from .protocols import TaskHistoryStore, TaskStore

log = structlog.get_logger()


@asynccontextmanager
async def unit_of_work(
    conn: aiosqlite.Connection,
    lock: asyncio.Lock,
) -> AsyncIterator[None]:
    """持有写锁执行一组写操作：成功提交，任何异常回滚

    进入时立即 BEGIN IMMEDIATE 获取 SQLite 写锁，单元内的读与写处于同一事务，
    其他连接（多 worker、CLI）的写单元在此期间等待 busy_timeout。

    Args:
        conn: 共享数据库连接
        lock: 串行化该连接上所有事务的锁

    Raises:
        UnavailableError: 数据库被锁或繁忙（可重试）
    """
    async with lock:
        try:
            await conn.execute("BEGIN IMMEDIATE")
            yield
            await conn.commit()
        except aiosqlite.OperationalError as e:
            await conn.rollback()
            log.warning("store_unavailable", error=str(e))
            raise UnavailableError() from e
        except BaseException:
            await conn.rollback()
            raise


@asynccontextmanager
async def read_snapshot(lock: asyncio.Lock) -> AsyncIterator[None]:
    """持有同一把锁读取，避免观察到进行中的事务"""
    async with lock:
        try:
            yield
        except aiosqlite.OperationalError as e:
            log.warning("store_unavailable", error=str(e))
            raise UnavailableError() from e


async def update_task_with_history(
    task_store: TaskStore,
    history_store: TaskHistoryStore,
    task: Task,
    entry: TaskHistoryEntry | None = None,
) -> None:
    """在调用方的事务内写入任务更新，以及（可选的）一条历史记录

    Args:
        task_store: TaskStore 实例
        history_store: TaskHistoryStore 实例
        task: 已应用 patch 的任务
        entry: 状态发生变化时的历史记录，否则为 None
    """
    await task_store.update_task(task)
    if entry is not None:
        await history_store.append_entry(entry)
