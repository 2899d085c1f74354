"""TraceMiddleware

为任务操作绑定 trace_id，贯穿同一任务的授权、变更与审计日志。
trace_id 从 /tasks/{task_id} 路径参数生成。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ULID 字符串长度
_ULID_LENGTH = 26


def extract_task_id(path: str) -> str | None:
    """从 /tasks/{task_id}[/...] 提取 task_id"""
    parts = path.strip("/").split("/")
    if len(parts) >= 2 and parts[0] == "tasks" and len(parts[1]) == _ULID_LENGTH:
        return parts[1]
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件 -- 为任务操作绑定 trace_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        task_id = extract_task_id(request.url.path)
        if task_id:
            structlog.contextvars.bind_contextvars(trace_id=f"trace-{task_id}")

        return await call_next(request)
