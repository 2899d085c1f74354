"""gateway 测试配置 -- FastAPI app + httpx AsyncClient + 令牌签发"""

import os
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskhub.core.models import User
from taskhub.core.store import StoreGroup
from taskhub.gateway.auth import create_access_token

TEST_JWT_SECRET = "test-secret-0123456789abcdef0123456789"


@pytest_asyncio.fixture
async def app(tmp_path: Path, store_group: StoreGroup):
    """创建测试用 FastAPI app 实例

    ASGITransport 不触发 lifespan，手动挂载共享的 StoreGroup，
    以便 seed fixture 与 HTTP 请求看到同一份数据。
    """
    os.environ["TASKHUB_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["TASKHUB_JWT_SECRET"] = TEST_JWT_SECRET

    from taskhub.gateway.main import create_app

    application = create_app()
    application.state.store_group = store_group
    yield application

    for key in ["TASKHUB_DB_PATH", "TASKHUB_JWT_SECRET"]:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_headers(app) -> Callable[[User], dict[str, str]]:
    """为用户签发令牌并构造 Authorization 头"""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user, app.state.auth_config)
        return {"Authorization": f"Bearer {token}"}

    return _headers
