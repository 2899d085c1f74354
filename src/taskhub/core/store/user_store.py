"""UserStore SQLite 实现

所有写方法不自动提交事务，需由调用方（StoreGroup.transaction）管理。
"""

from datetime import datetime

import aiosqlite

from ..models.user import User

_COLUMNS = "id, name, email, password_hash, role, created_at, updated_at"


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """创建用户记录"""
        await self._conn.execute(
            f"INSERT INTO users ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                user.id,
                user.name,
                user.email,
                user.password_hash,
                user.role.value,
                user.created_at.isoformat(),
                user.updated_at.isoformat(),
            ),
        )

    async def get_user(self, user_id: str) -> User | None:
        """根据 id 查询用户"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users WHERE id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def get_user_by_email(self, email: str) -> User | None:
        """根据 email 查询用户"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users WHERE email = ?",
            (email,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def update_user(self, user: User) -> None:
        """整行覆盖更新（id 不变）"""
        await self._conn.execute(
            """
            UPDATE users
            SET name = ?, email = ?, password_hash = ?, role = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                user.name,
                user.email,
                user.password_hash,
                user.role.value,
                user.updated_at.isoformat(),
                user.id,
            ),
        )

    async def delete_user(self, user_id: str) -> None:
        """删除用户（成员关系级联删除，指派被置空）"""
        await self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """将数据库行转换为 User 模型"""
        return User(
            id=row[0],
            name=row[1],
            email=row[2],
            password_hash=row[3],
            role=row[4],
            created_at=datetime.fromisoformat(row[5]),
            updated_at=datetime.fromisoformat(row[6]),
        )
