"""TaskHistoryStore SQLite 实现

task_history 表 append-only：只允许插入，不允许更新或删除。
changed_at 以固定微秒精度的 ISO-8601 文本存储，保证字典序即时间序。
"""

from datetime import datetime

import aiosqlite

from ..models.history import TaskHistoryEntry, TaskHistoryView
from ..models.user import UserRef


def format_changed_at(ts: datetime) -> str:
    """固定到微秒精度，避免 isoformat 省略 0 微秒导致排序错位"""
    return ts.isoformat(timespec="microseconds")


class SqliteTaskHistoryStore:
    """TaskHistoryStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_entry(self, entry: TaskHistoryEntry) -> None:
        """追加一条状态变更记录（append-only）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            """
            INSERT INTO task_history (id, task_id, changed_by, previous_status,
                                      new_status, changed_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                entry.id,
                entry.task_id,
                entry.changed_by,
                entry.previous_status.value,
                entry.new_status.value,
                format_changed_at(entry.changed_at),
            ),
        )

    async def list_for_task(self, task_id: str) -> list[TaskHistoryView]:
        """查询任务的全部历史，按 changed_at 倒序（同一时刻按写入顺序倒序）"""
        cursor = await self._conn.execute(
            """
            SELECT h.id, h.task_id, h.changed_by, h.previous_status, h.new_status,
                   h.changed_at, u.id, u.name, u.email
            FROM task_history h
            LEFT JOIN users u ON u.id = h.changed_by
            WHERE h.task_id = ?
            ORDER BY h.changed_at DESC, h.rowid DESC
            """,
            (task_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_view(row) for row in rows]

    async def count_for_task(self, task_id: str) -> int:
        """统计任务的历史条数"""
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM task_history WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_view(row: aiosqlite.Row) -> TaskHistoryView:
        """将联表查询行转换为 TaskHistoryView"""
        user = None
        if row[6] is not None:
            user = UserRef(id=row[6], name=row[7], email=row[8])
        return TaskHistoryView(
            id=row[0],
            task_id=row[1],
            changed_by=row[2],
            previous_status=row[3],
            new_status=row[4],
            changed_at=datetime.fromisoformat(row[5]),
            user=user,
        )
