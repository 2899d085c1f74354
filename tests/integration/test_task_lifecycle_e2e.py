"""端到端：注册 -> 登录 -> 建团队 -> 加成员 -> 建任务 -> 指派 -> 状态流转 -> 历史

管理员通过 CLI 的 create_admin 创建，其余全部走 HTTP。
"""

from taskhub.core.__main__ import create_admin

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"


async def _login(client, email: str, password: str) -> dict[str, str]:
    resp = await client.post("/sessions", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


class TestTaskLifecycle:
    async def test_full_lifecycle(self, integration_client):
        client = integration_client
        assert await create_admin("Admin", ADMIN_EMAIL, ADMIN_PASSWORD) is True
        admin = await _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)

        # 成员自助注册
        resp = await client.post(
            "/users",
            json={"name": "Dev", "email": "dev@example.com", "password": "dev-pass"},
        )
        assert resp.status_code == 201
        dev_id = resp.json()["id"]
        dev = await _login(client, "dev@example.com", "dev-pass")

        # 团队 + 成员
        resp = await client.post("/teams", json={"name": "Core"}, headers=admin)
        team_id = resp.json()["id"]
        resp = await client.post(
            "/team-members",
            json={"user_id": dev_id, "team_id": team_id},
            headers=admin,
        )
        assert resp.status_code == 201

        # 建任务，指派前成员无法修改
        resp = await client.post(
            "/tasks",
            json={"title": "发布 v1", "priority": "high", "team_id": team_id},
            headers=dev,
        )
        task_id = resp.json()["id"]
        resp = await client.patch(
            f"/tasks/{task_id}", json={"status": "in_progress"}, headers=dev
        )
        assert resp.status_code == 403

        resp = await client.patch(
            f"/tasks/{task_id}/assign", json={"assigned_to": dev_id}, headers=admin
        )
        assert resp.status_code == 200

        # 被指派人推进状态
        for status in ("in_progress", "in_progress", "completed"):
            resp = await client.patch(
                f"/tasks/{task_id}", json={"status": status}, headers=dev
            )
            assert resp.status_code == 200

        resp = await client.get(f"/tasks/{task_id}/history", headers=dev)
        history = resp.json()
        assert [(h["previous_status"], h["new_status"]) for h in history] == [
            ("in_progress", "completed"),
            ("pending", "in_progress"),
        ]
        assert all(h["user"]["id"] == dev_id for h in history)
        assert all(h["changed_by"] == dev_id for h in history)

        # 迁移到新团队后指派被清空，原被指派人失去权限
        resp = await client.post("/teams", json={"name": "Ops"}, headers=admin)
        ops_id = resp.json()["id"]
        resp = await client.patch(
            f"/tasks/{task_id}", json={"team_id": ops_id}, headers=admin
        )
        assert resp.json()["assigned_to"] is None
        resp = await client.delete(f"/tasks/{task_id}", headers=dev)
        assert resp.status_code == 403

        resp = await client.delete(f"/tasks/{task_id}", headers=admin)
        assert resp.status_code == 200

    async def test_create_admin_rejects_duplicate_email(self, integration_app):
        assert await create_admin("Admin", ADMIN_EMAIL, ADMIN_PASSWORD) is True
        assert await create_admin("Admin 2", ADMIN_EMAIL, ADMIN_PASSWORD) is False
