"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store、Principal 与授权门禁

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from taskhub.core.errors import UnauthenticatedError
from taskhub.core.models import Principal, UserRole
from taskhub.core.store import StoreGroup

from .auth import decode_access_token
from .config import AuthConfig
from .services.authorization import AuthorizationResolver

_bearer = HTTPBearer(auto_error=False)


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_auth_config(request: Request) -> AuthConfig:
    """从 app.state 获取 AuthConfig 实例"""
    return request.app.state.auth_config


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    config: AuthConfig = Depends(get_auth_config),
) -> Principal | None:
    """解析 Bearer 令牌；缺失时返回 None，无效时抛出 UnauthenticatedError"""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials, config)


async def require_principal(
    principal: Principal | None = Depends(get_principal),
) -> Principal:
    """要求已认证"""
    if principal is None:
        raise UnauthenticatedError("JWT token not found.")
    return principal


def require_role(*roles: UserRole) -> Callable[..., Awaitable[Principal]]:
    """纯角色门禁（无指派回退）"""

    async def dependency(
        principal: Principal = Depends(require_principal),
        store_group: StoreGroup = Depends(get_store_group),
    ) -> Principal:
        decision = await AuthorizationResolver(store_group).authorize(principal, roles)
        decision.raise_for_denial()
        return principal

    return dependency


def require_role_or_assignment(*roles: UserRole) -> Callable[..., Awaitable[Principal]]:
    """角色或指派门禁 -- 路由需包含 task_id 路径参数"""

    async def dependency(
        task_id: str,
        principal: Principal = Depends(require_principal),
        store_group: StoreGroup = Depends(get_store_group),
    ) -> Principal:
        decision = await AuthorizationResolver(store_group).authorize(
            principal, roles, task_id=task_id
        )
        decision.raise_for_denial()
        return principal

    return dependency
