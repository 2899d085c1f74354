"""UserService -- 用户注册/资料更新/注销 + 会话签发"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskhub.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthenticatedError,
)
from taskhub.core.models import User, UserRole
from taskhub.core.security import hash_password, verify_password
from taskhub.core.store import StoreGroup
from ulid import ULID

from ..auth import create_access_token
from ..config import AuthConfig

log = structlog.get_logger()


class UserService:
    """用户业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def register(self, name: str, email: str, password: str) -> User:
        """注册新用户（角色固定为 member）

        Raises:
            ConflictError: 邮箱已被占用
        """
        now = datetime.now(UTC)
        user = User(
            id=str(ULID()),
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.MEMBER,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction() as stores:
            if await stores.user_store.get_user_by_email(email) is not None:
                raise ConflictError("Email already in use.")
            try:
                await stores.user_store.create_user(user)
            except aiosqlite.IntegrityError as e:
                raise ConflictError("Email already in use.") from e

        log.info("user_registered", user_id=user.id)
        return user

    async def update_profile(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        """更新当前用户资料

        Raises:
            InvalidStateError: 未提供任何字段
            NotFoundError: 用户不存在
            ConflictError: 新邮箱已被占用
        """
        if name is None and email is None and password is None:
            raise InvalidStateError("At least one field must be provided to update.")

        new_hash = hash_password(password) if password is not None else None

        async with self._stores.transaction() as stores:
            user = await stores.user_store.get_user(user_id)
            if user is None:
                raise NotFoundError("User not found.")

            if email is not None and email != user.email:
                if await stores.user_store.get_user_by_email(email) is not None:
                    raise ConflictError("Email already in use.")

            user = user.model_copy(
                update={
                    "name": name if name is not None else user.name,
                    "email": email if email is not None else user.email,
                    "password_hash": new_hash or user.password_hash,
                    "updated_at": datetime.now(UTC),
                }
            )
            await stores.user_store.update_user(user)

        log.info("user_updated", user_id=user_id)
        return user

    async def delete_account(self, user_id: str) -> None:
        """注销当前用户

        Raises:
            NotFoundError: 用户不存在
        """
        async with self._stores.transaction() as stores:
            if await stores.user_store.get_user(user_id) is None:
                raise NotFoundError("User not found.")
            await stores.user_store.delete_user(user_id)

        log.info("user_deleted", user_id=user_id)

    async def create_session(
        self,
        email: str,
        password: str,
        config: AuthConfig,
    ) -> tuple[str, User]:
        """校验邮箱+密码并签发令牌

        Returns:
            (token, user)

        Raises:
            UnauthenticatedError: 邮箱或密码错误
        """
        async with self._stores.snapshot() as stores:
            user = await stores.user_store.get_user_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            raise UnauthenticatedError("Email or password incorrect!")

        token = create_access_token(user, config)
        log.info("session_created", user_id=user.id)
        return token, user
