"""认证协作方 -- 签发与解析 Bearer JWT

令牌 sub 为用户 ID，role 声明携带签发时的角色。
核心层只接收解析后的 Principal，不接触凭据本身。
"""

from datetime import UTC, datetime, timedelta

import jwt
from taskhub.core.errors import UnauthenticatedError
from taskhub.core.models import Principal, User

from .config import AuthConfig


def create_access_token(user: User, config: AuthConfig) -> str:
    """为用户签发访问令牌"""
    now = datetime.now(UTC)
    payload = {
        "sub": user.id,
        "role": user.role.value,
        "iat": now,
        "exp": now + timedelta(seconds=config.expires_in_s),
    }
    return jwt.encode(
        payload,
        config.jwt_secret.get_secret_value(),
        algorithm=config.jwt_algorithm,
    )


def decode_access_token(token: str, config: AuthConfig) -> Principal:
    """解析访问令牌为 Principal

    Raises:
        UnauthenticatedError: 令牌过期、签名无效或声明缺失
    """
    try:
        payload = jwt.decode(
            token,
            config.jwt_secret.get_secret_value(),
            algorithms=[config.jwt_algorithm],
        )
        return Principal(id=payload["sub"], role=payload.get("role", "member"))
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise UnauthenticatedError("Invalid JWT token.") from e
