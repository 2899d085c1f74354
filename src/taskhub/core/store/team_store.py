"""TeamStore / MembershipStore SQLite 实现

成员关系以 user_id 为键：get_membership(user_id) 返回该用户唯一的团队归属。
"""

from datetime import datetime

import aiosqlite

from ..models.team import Team, TeamMember, TeamMembership

_TEAM_COLUMNS = "id, name, description, created_at, updated_at"


class SqliteTeamStore:
    """TeamStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_team(self, team: Team) -> None:
        """创建团队记录"""
        await self._conn.execute(
            f"INSERT INTO teams ({_TEAM_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (
                team.id,
                team.name,
                team.description,
                team.created_at.isoformat(),
                team.updated_at.isoformat(),
            ),
        )

    async def get_team(self, team_id: str) -> Team | None:
        """根据 id 查询团队"""
        cursor = await self._conn.execute(
            f"SELECT {_TEAM_COLUMNS} FROM teams WHERE id = ?",
            (team_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_team(row)

    async def get_team_by_name(self, name: str) -> Team | None:
        """根据名称查询团队"""
        cursor = await self._conn.execute(
            f"SELECT {_TEAM_COLUMNS} FROM teams WHERE name = ?",
            (name,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_team(row)

    async def list_teams(self) -> list[Team]:
        """查询全部团队，按名称正序"""
        cursor = await self._conn.execute(
            f"SELECT {_TEAM_COLUMNS} FROM teams ORDER BY name ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_team(row) for row in rows]

    async def update_team(self, team: Team) -> None:
        """更新团队名称/描述"""
        await self._conn.execute(
            "UPDATE teams SET name = ?, description = ?, updated_at = ? WHERE id = ?",
            (team.name, team.description, team.updated_at.isoformat(), team.id),
        )

    async def delete_team(self, team_id: str) -> None:
        """删除团队（仍有任务或成员时由外键拒绝）"""
        await self._conn.execute("DELETE FROM teams WHERE id = ?", (team_id,))

    @staticmethod
    def _row_to_team(row: aiosqlite.Row) -> Team:
        """将数据库行转换为 Team 模型"""
        return Team(
            id=row[0],
            name=row[1],
            description=row[2],
            created_at=datetime.fromisoformat(row[3]),
            updated_at=datetime.fromisoformat(row[4]),
        )


class SqliteMembershipStore:
    """MembershipStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def add_membership(self, membership: TeamMembership) -> None:
        """写入成员关系；用户已有归属时触发主键冲突"""
        await self._conn.execute(
            "INSERT INTO team_members (user_id, team_id, created_at) VALUES (?, ?, ?)",
            (
                membership.user_id,
                membership.team_id,
                membership.created_at.isoformat(),
            ),
        )

    async def get_membership(self, user_id: str) -> TeamMembership | None:
        """查询用户当前的团队归属（按 user_id 单键查找）"""
        cursor = await self._conn.execute(
            "SELECT user_id, team_id, created_at FROM team_members WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return TeamMembership(
            user_id=row[0],
            team_id=row[1],
            created_at=datetime.fromisoformat(row[2]),
        )

    async def list_members(self, team_id: str) -> list[TeamMember]:
        """查询团队成员，按角色正序"""
        cursor = await self._conn.execute(
            """
            SELECT u.id, u.name, u.email, u.role
            FROM team_members m
            JOIN users u ON u.id = m.user_id
            WHERE m.team_id = ?
            ORDER BY u.role ASC, u.name ASC
            """,
            (team_id,),
        )
        rows = await cursor.fetchall()
        return [
            TeamMember(id=row[0], name=row[1], email=row[2], role=row[3])
            for row in rows
        ]

    async def delete_membership(self, user_id: str) -> None:
        """删除用户的成员关系"""
        await self._conn.execute(
            "DELETE FROM team_members WHERE user_id = ?",
            (user_id,),
        )
