"""AuthConfig -- 会话令牌配置加载

从环境变量加载配置，不硬编码密钥。
"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

_DEFAULT_EXPIRES_IN_S = 86400


class AuthConfig(BaseModel):
    """会话令牌配置 -- 从环境变量加载

    环境变量:
        TASKHUB_JWT_SECRET: HS256 签名密钥
        TASKHUB_JWT_EXPIRES_IN_S: 令牌有效期（秒，默认 86400）
    """

    jwt_secret: SecretStr = Field(
        default=SecretStr("dev-secret-change-me-in-production"),
        description="JWT 签名密钥",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT 签名算法")
    expires_in_s: int = Field(
        default=_DEFAULT_EXPIRES_IN_S,
        ge=1,
        description="令牌有效期（秒）",
    )


def load_auth_config() -> AuthConfig:
    """从环境变量加载 AuthConfig

    环境变量映射:
        TASKHUB_JWT_SECRET -> jwt_secret
        TASKHUB_JWT_EXPIRES_IN_S -> expires_in_s (默认 86400)

    Returns:
        AuthConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TASKHUB_JWT_SECRET"):
        kwargs["jwt_secret"] = SecretStr(val)

    if val := os.environ.get("TASKHUB_JWT_EXPIRES_IN_S"):
        try:
            kwargs["expires_in_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_expires_config",
                env_var="TASKHUB_JWT_EXPIRES_IN_S",
                value=val,
                fallback=_DEFAULT_EXPIRES_IN_S,
            )
            # 使用默认值，不阻塞启动

    return AuthConfig(**kwargs)
