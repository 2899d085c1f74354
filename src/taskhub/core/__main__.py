"""CLI 入口模块 -- python -m taskhub.core <command>

支持的命令：
  init-db                               初始化数据库 schema
  create-admin <name> <email> <password>  创建管理员账号
"""

import asyncio
import sys
from datetime import UTC, datetime

from ulid import ULID

from .config import get_db_path

_USAGE = """用法: python -m taskhub.core <command>
命令:
  init-db                                 初始化数据库 schema
  create-admin <name> <email> <password>  创建管理员账号"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "create-admin":
        if len(sys.argv) != 5:
            print(_USAGE)
            sys.exit(1)
        ok = asyncio.run(create_admin(*sys.argv[2:5]))
        if not ok:
            sys.exit(1)
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, create-admin")
        sys.exit(1)


async def init_database() -> None:
    """初始化数据库 schema"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    await store_group.close()
    print("初始化完成")


async def create_admin(name: str, email: str, password: str) -> bool:
    """创建管理员账号（自助注册只能得到 member 角色）

    Returns:
        True 如果创建成功，邮箱已被占用时返回 False
    """
    from .models import User, UserRole
    from .security import hash_password
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        async with store_group.transaction() as stores:
            if await stores.user_store.get_user_by_email(email) is not None:
                print(f"邮箱已被占用: {email}")
                return False
            now = datetime.now(UTC)
            user = User(
                id=str(ULID()),
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
                created_at=now,
                updated_at=now,
            )
            await stores.user_store.create_user(user)
        print(f"管理员已创建: {user.id}")
        return True
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
