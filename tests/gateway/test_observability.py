"""可观测性测试 -- request_id 透传、trace_id 提取、日志配置"""

import logging

import structlog
from taskhub.gateway.middleware.logging_config import setup_logging
from taskhub.gateway.middleware.trace_mw import extract_task_id

TASK_ID = "01JTASK0000000000000000001"


class TestRequestId:
    async def test_response_carries_generated_request_id(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert len(resp.headers["X-Request-ID"]) == 26

    async def test_incoming_request_id_is_reused(self, client):
        resp = await client.get("/health", headers={"X-Request-ID": "req-abc"})
        assert resp.headers["X-Request-ID"] == "req-abc"

    async def test_error_response_also_carries_request_id(self, client):
        resp = await client.get("/tasks")
        assert resp.status_code == 401
        assert "X-Request-ID" in resp.headers


class TestExtractTaskId:
    def test_task_path(self):
        assert extract_task_id(f"/tasks/{TASK_ID}") == TASK_ID

    def test_nested_task_path(self):
        assert extract_task_id(f"/tasks/{TASK_ID}/history") == TASK_ID

    def test_non_ulid_segment(self):
        assert extract_task_id("/tasks/abc") is None

    def test_other_resource(self):
        assert extract_task_id(f"/teams/{TASK_ID}") is None
        assert extract_task_id("/tasks") is None


class TestSetupLogging:
    def test_level_from_argument(self):
        setup_logging(log_format="json", log_level="warning")
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("TASKHUB_LOG_LEVEL", "DEBUG")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_logger_usable_after_setup(self):
        setup_logging(log_format="dev")
        structlog.get_logger().info("test_event", key="value")
