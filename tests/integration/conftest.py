"""集成测试共享 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskhub.core.store import create_store_group


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """集成测试用 FastAPI app"""
    os.environ["TASKHUB_DB_PATH"] = str(tmp_path / "integration.db")
    os.environ["TASKHUB_JWT_SECRET"] = "integration-secret-0123456789abcdef"

    from taskhub.gateway.main import create_app

    app = create_app()

    store_group = await create_store_group(str(tmp_path / "integration.db"))
    app.state.store_group = store_group

    yield app

    await store_group.close()
    os.environ.pop("TASKHUB_DB_PATH", None)
    os.environ.pop("TASKHUB_JWT_SECRET", None)


@pytest_asyncio.fixture
async def integration_client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
