"""MembershipService -- 团队成员关系管理 + 成员资格守卫

成员关系按 user_id 单键存储。"是否为团队 X 的成员" 计算为：
该用户存在成员关系，且其团队等于 X；从不使用 (team, user) 组合查找。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskhub.core.errors import ConflictError, NotFoundError
from taskhub.core.models import TeamMember, TeamMembership
from taskhub.core.store import StoreGroup
from taskhub.core.store.protocols import MembershipStore

log = structlog.get_logger()


async def is_member(
    membership_store: MembershipStore,
    team_id: str,
    user_id: str,
) -> bool:
    """成员资格守卫 -- 需在调用方的事务/快照内调用"""
    membership = await membership_store.get_membership(user_id)
    return membership is not None and membership.team_id == team_id


class MembershipService:
    """团队成员业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def add_member(self, team_id: str, user_id: str) -> TeamMembership:
        """将用户加入团队

        Raises:
            NotFoundError: 用户或团队不存在
            ConflictError: 用户已属于某个团队
        """
        async with self._stores.transaction() as stores:
            if await stores.user_store.get_user(user_id) is None:
                raise NotFoundError("User not found.")
            if await stores.team_store.get_team(team_id) is None:
                raise NotFoundError("Team not found.")
            if await stores.membership_store.get_membership(user_id) is not None:
                raise ConflictError("User is already a member of a team.")

            membership = TeamMembership(
                user_id=user_id,
                team_id=team_id,
                created_at=datetime.now(UTC),
            )
            try:
                await stores.membership_store.add_membership(membership)
            except aiosqlite.IntegrityError as e:
                # 其他连接并发写入同一用户：主键冲突即单团队约束冲突
                raise ConflictError("User is already a member of a team.") from e

        log.info("team_member_added", team_id=team_id, user_id=user_id)
        return membership

    async def list_members(self, team_id: str) -> list[TeamMember]:
        """查询团队成员

        Raises:
            NotFoundError: 团队不存在
        """
        async with self._stores.snapshot() as stores:
            if await stores.team_store.get_team(team_id) is None:
                raise NotFoundError("Team not found.")
            return await stores.membership_store.list_members(team_id)

    async def remove_member(self, team_id: str, user_id: str) -> None:
        """将用户移出团队

        Raises:
            NotFoundError: 该用户不是此团队的成员
        """
        async with self._stores.transaction() as stores:
            if not await is_member(stores.membership_store, team_id, user_id):
                raise NotFoundError("Member not found in this team.")
            await stores.membership_store.delete_membership(user_id)

        log.info("team_member_removed", team_id=team_id, user_id=user_id)

    async def is_member(self, team_id: str, user_id: str) -> bool:
        """成员资格查询"""
        async with self._stores.snapshot() as stores:
            return await is_member(stores.membership_store, team_id, user_id)
