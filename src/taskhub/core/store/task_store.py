"""TaskStore SQLite 实现

tasks 表只保存当前状态；状态变更的审计由 task_history 表承担，
两者的联合写入见 transaction.update_task_with_history。
"""

from datetime import datetime

import aiosqlite

from ..models.task import Task, TaskFilters

_COLUMNS = (
    "id, title, description, status, priority, team_id, assigned_to, "
    "created_at, updated_at"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        await self._conn.execute(
            f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                task.id,
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.team_id,
                task.assigned_to,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        """查询任务列表，提供的筛选字段 AND 组合，按 created_at 倒序"""
        clauses: list[str] = []
        params: list[str] = []
        if filters is not None:
            # 列名来自模型字段，值走参数绑定
            for column, value in filters.model_dump(exclude_none=True).items():
                clauses.append(f"{column} = ?")
                params.append(str(value))

        sql = f"SELECT {_COLUMNS} FROM tasks"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC"

        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task(self, task: Task) -> None:
        """单次写入任务的全部可变字段"""
        await self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, status = ?, priority = ?,
                team_id = ?, assigned_to = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.team_id,
                task.assigned_to,
                task.updated_at.isoformat(),
                task.id,
            ),
        )

    async def assign_task(self, task_id: str, assigned_to: str, updated_at: str) -> None:
        """设置任务的被指派人"""
        await self._conn.execute(
            "UPDATE tasks SET assigned_to = ?, updated_at = ? WHERE id = ?",
            (assigned_to, updated_at, task_id),
        )

    async def delete_task(self, task_id: str) -> None:
        """删除任务（历史记录保留）"""
        await self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            title=row[1],
            description=row[2],
            status=row[3],
            priority=row[4],
            team_id=row[5],
            assigned_to=row[6],
            created_at=datetime.fromisoformat(row[7]),
            updated_at=datetime.fromisoformat(row[8]),
        )
