"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、密码哈希强度、SQLite 超时与字段长度等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskhub.db"),
    )


def get_password_hash_rounds() -> int:
    """获取 bcrypt cost 因子（默认 8）"""
    return int(os.environ.get("TASKHUB_PASSWORD_HASH_ROUNDS", "8"))


# SQLite busy_timeout（毫秒），超时后抛出 "database is locked"
SQLITE_BUSY_TIMEOUT_MS: int = int(
    os.environ.get("TASKHUB_SQLITE_BUSY_TIMEOUT_MS", "5000")
)

# 用户名最大长度
USER_NAME_MAX_LENGTH: int = 100

# 密码长度范围
PASSWORD_MIN_LENGTH: int = 6
PASSWORD_MAX_LENGTH: int = 100
