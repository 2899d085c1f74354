"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 异常映射 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from taskhub.core.config import get_db_path
from taskhub.core.errors import TaskHubError
from taskhub.core.store import create_store_group

from .config import load_auth_config
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks, team_members, teams, users

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB，关闭时清理连接"""
    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group
    log.info("store_initialized", db_path=get_db_path())

    yield

    # 关闭：清理数据库连接
    if getattr(app.state, "store_group", None) is not None:
        await app.state.store_group.close()


async def handle_taskhub_error(request: Request, exc: TaskHubError) -> JSONResponse:
    """业务异常 -> {"error": {"code", "message"}}"""
    if exc.status_code >= 500:
        log.warning("request_failed", code=exc.code, recoverable=exc.recoverable)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """未预期异常：记录完整异常后返回 500"""
    log.exception("unhandled_error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": f"Internal server error - {exc}",
            }
        },
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskHub",
        version="0.1.0",
        description="团队任务管理 API：角色/指派授权 + 状态变更审计",
        lifespan=lifespan,
    )
    app.state.auth_config = load_auth_config()

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(TaskHubError, handle_taskhub_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # 初始化日志
    setup_logging()

    # 注册路由
    app.include_router(users.router, tags=["users"])
    app.include_router(teams.router, tags=["teams"])
    app.include_router(team_members.router, tags=["team-members"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
