"""健康检查路由

GET /health: 存活探针，进程在即返回 200。
GET /ready: 就绪探针，检查存储连接、WAL 模式与磁盘余量。
"""

import shutil

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse
from taskhub.core.store.sqlite_init import verify_wal_mode

log = structlog.get_logger()

router = APIRouter()

# 低于该余量（MB）视为未就绪
_MIN_FREE_DISK_MB = 64


@router.get("/health")
async def health():
    """存活探针"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """就绪探针

    checks:
        sqlite: 共享连接可执行查询
        wal: journal_mode 为 WAL（并发读写依赖）
        disk_space_mb: 数据盘剩余空间
    """
    checks: dict[str, str | int] = {}
    failed: list[str] = []

    store_group = getattr(request.app.state, "store_group", None)
    if store_group is None:
        checks["sqlite"] = "error: store not initialized"
        failed.append("sqlite")
    else:
        try:
            cursor = await store_group.conn.execute("SELECT 1")
            await cursor.fetchone()
            checks["sqlite"] = "ok"
            checks["wal"] = "ok" if await verify_wal_mode(store_group.conn) else "off"
        except Exception as e:
            log.warning("readiness_sqlite_error", error=str(e))
            checks["sqlite"] = f"error: {e}"
            failed.append("sqlite")

    try:
        free_mb = shutil.disk_usage("/").free // (1024 * 1024)
    except OSError:
        free_mb = 0
    checks["disk_space_mb"] = free_mb
    if free_mb < _MIN_FREE_DISK_MB:
        failed.append("disk_space_mb")

    if failed:
        log.warning("readiness_failed", failed=failed)

    return JSONResponse(
        status_code=503 if failed else 200,
        content={"status": "not_ready" if failed else "ready", "checks": checks},
    )
