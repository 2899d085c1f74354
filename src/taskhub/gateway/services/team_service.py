"""TeamService -- 团队增删改查"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskhub.core.errors import ConflictError, NotFoundError
from taskhub.core.models import Team
from taskhub.core.store import StoreGroup
from ulid import ULID

log = structlog.get_logger()


class TeamService:
    """团队业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def create_team(self, name: str, description: str | None = None) -> Team:
        """创建团队

        Raises:
            ConflictError: 名称已被占用
        """
        now = datetime.now(UTC)
        team = Team(
            id=str(ULID()),
            name=name,
            description=description,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction() as stores:
            if await stores.team_store.get_team_by_name(name) is not None:
                raise ConflictError("Team name already in use.")
            await stores.team_store.create_team(team)

        log.info("team_created", team_id=team.id)
        return team

    async def list_teams(self) -> list[Team]:
        """查询全部团队"""
        async with self._stores.snapshot() as stores:
            return await stores.team_store.list_teams()

    async def edit_team(
        self,
        team_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Team:
        """编辑团队名称/描述，未提供的字段保持不变

        Raises:
            NotFoundError: 团队不存在
            ConflictError: 新名称已被其他团队占用
        """
        async with self._stores.transaction() as stores:
            team = await stores.team_store.get_team(team_id)
            if team is None:
                raise NotFoundError("Team not found.")

            if name is not None and name != team.name:
                if await stores.team_store.get_team_by_name(name) is not None:
                    raise ConflictError("Team name already in use.")

            team = team.model_copy(
                update={
                    "name": name if name is not None else team.name,
                    "description": (
                        description if description is not None else team.description
                    ),
                    "updated_at": datetime.now(UTC),
                }
            )
            await stores.team_store.update_team(team)

        log.info("team_updated", team_id=team_id)
        return team

    async def delete_team(self, team_id: str) -> None:
        """删除团队（不级联删除任务）

        Raises:
            NotFoundError: 团队不存在
            ConflictError: 团队仍有任务或成员
        """
        async with self._stores.transaction() as stores:
            if await stores.team_store.get_team(team_id) is None:
                raise NotFoundError("Team not found.")
            try:
                await stores.team_store.delete_team(team_id)
            except aiosqlite.IntegrityError as e:
                raise ConflictError("Team still has tasks or members.") from e

        log.info("team_deleted", team_id=team_id)
