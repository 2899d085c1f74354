"""AuthorizationResolver -- 角色 / 任务指派 两种授权策略

两种策略彼此独立：
- 角色检查：principal.role 属于 required_roles 即放行
- 指派检查：目标任务存在且 assigned_to == principal.id 即放行

role-or-assignment 组合按顺序求值：先角色，失败再指派，任一成功即放行。
两者均失败时对外暴露的是指派检查的失败原因（第二个策略），角色检查的失败被有意丢弃。
判定以 Allow / Deny 值返回，不依赖异常做分支；Deny.raise_for_denial() 仅在传输层调用。
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

import structlog
from taskhub.core.errors import (
    ForbiddenError,
    NotFoundError,
    TaskHubError,
    UnauthenticatedError,
)
from taskhub.core.models import Principal, UserRole
from taskhub.core.store import StoreGroup

log = structlog.get_logger()


class AuthSource(StrEnum):
    """判定来源策略"""

    ROLE = "role"
    ASSIGNMENT = "assignment"


@dataclass(frozen=True)
class Allow:
    """放行"""

    source: AuthSource

    @property
    def allowed(self) -> bool:
        return True

    def raise_for_denial(self) -> None:
        return None


@dataclass(frozen=True)
class Deny:
    """拒绝 -- error 为对调用方可见的失败"""

    source: AuthSource
    error: TaskHubError

    @property
    def allowed(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return self.error.message

    def raise_for_denial(self) -> None:
        raise self.error


Decision = Allow | Deny


class AuthorizationResolver:
    """授权判定服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    @staticmethod
    def check_role(
        principal: Principal | None,
        required_roles: Iterable[UserRole | str],
    ) -> Decision:
        """角色检查：不访问存储"""
        if principal is None:
            return Deny(AuthSource.ROLE, UnauthenticatedError("User not authenticated."))
        if principal.role not in {UserRole(r) for r in required_roles}:
            return Deny(AuthSource.ROLE, ForbiddenError("User not authorized."))
        return Allow(AuthSource.ROLE)

    async def check_assignment(
        self,
        principal: Principal | None,
        task_id: str,
    ) -> Decision:
        """指派检查：先确认任务存在，再确认 principal 是被指派人"""
        async with self._stores.snapshot() as stores:
            task = await stores.task_store.get_task(task_id)

        if task is None:
            return Deny(AuthSource.ASSIGNMENT, NotFoundError("Task not found."))
        if principal is None:
            return Deny(
                AuthSource.ASSIGNMENT,
                UnauthenticatedError("User not authenticated."),
            )
        if task.assigned_to != principal.id:
            return Deny(
                AuthSource.ASSIGNMENT,
                ForbiddenError("User not authorized to access this task."),
            )
        return Allow(AuthSource.ASSIGNMENT)

    async def authorize(
        self,
        principal: Principal | None,
        required_roles: Iterable[UserRole | str],
        task_id: str | None = None,
    ) -> Decision:
        """授权判定

        task_id 为 None 时为纯角色模式；否则为 role-or-assignment 模式，
        角色失败后回退到指派检查，最终失败时返回指派检查的 Deny。

        Args:
            principal: 当前请求主体，未认证为 None
            required_roles: 允许的角色集合
            task_id: 目标任务 ID（role-or-assignment 模式）

        Returns:
            Allow 或 Deny
        """
        decision = self.check_role(principal, required_roles)
        if not decision.allowed and task_id is not None:
            decision = await self.check_assignment(principal, task_id)

        if not decision.allowed:
            log.info(
                "authorization_denied",
                source=decision.source.value,
                reason=decision.reason,
                principal_id=principal.id if principal else None,
                task_id=task_id,
            )
        return decision
