"""团队与团队成员路由测试"""

from taskhub.core.models import UserRole


class TestTeamRoutes:
    async def test_teams_admin_only(self, client, seed, auth_headers):
        manager = await seed.user(role=UserRole.MANAGER)
        resp = await client.get("/teams", headers=auth_headers(manager))
        assert resp.status_code == 403
        assert resp.json()["error"]["message"] == "User not authorized."

    async def test_create_list_edit_delete(self, client, seed, auth_headers):
        admin = await seed.user(role=UserRole.ADMIN)
        headers = auth_headers(admin)

        resp = await client.post(
            "/teams", json={"name": "Platform", "description": "平台组"}, headers=headers
        )
        assert resp.status_code == 201
        team_id = resp.json()["id"]

        resp = await client.get("/teams", headers=headers)
        assert [t["name"] for t in resp.json()] == ["Platform"]

        resp = await client.patch(
            f"/teams/{team_id}", json={"name": "Infra"}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Infra"
        assert resp.json()["description"] == "平台组"

        resp = await client.delete(f"/teams/{team_id}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Team deleted successfully."}

    async def test_duplicate_name_conflict(self, client, seed, auth_headers):
        admin = await seed.user(role=UserRole.ADMIN)
        await seed.team(name="Platform")

        resp = await client.post(
            "/teams", json={"name": "Platform"}, headers=auth_headers(admin)
        )
        assert resp.status_code == 409

    async def test_delete_team_with_tasks_conflict(self, client, seed, auth_headers):
        admin = await seed.user(role=UserRole.ADMIN)
        team = await seed.team()
        await seed.task(team)

        resp = await client.delete(f"/teams/{team.id}", headers=auth_headers(admin))
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "CONFLICT"


class TestTeamMemberRoutes:
    async def test_add_list_remove(self, client, seed, auth_headers):
        admin = await seed.user(role=UserRole.ADMIN)
        member = await seed.user(name="Mia")
        team = await seed.team()
        body = {"user_id": member.id, "team_id": team.id}

        resp = await client.post("/team-members", json=body, headers=auth_headers(admin))
        assert resp.status_code == 201
        assert resp.json()["user_id"] == member.id

        resp = await client.get(
            "/team-members", params={"team_id": team.id}, headers=auth_headers(member)
        )
        assert resp.status_code == 200
        assert [m["name"] for m in resp.json()] == ["Mia"]

        resp = await client.request(
            "DELETE", "/team-members", json=body, headers=auth_headers(admin)
        )
        assert resp.status_code == 200
        assert resp.json() == {"message": "Team member deleted successfully."}

    async def test_second_team_is_conflict(self, client, seed, auth_headers):
        admin = await seed.user(role=UserRole.ADMIN)
        member = await seed.user()
        team_a = await seed.team()
        team_b = await seed.team()
        await seed.member(team_a, member)

        resp = await client.post(
            "/team-members",
            json={"user_id": member.id, "team_id": team_b.id},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 409

    async def test_member_cannot_add(self, client, seed, auth_headers):
        member = await seed.user()
        team = await seed.team()

        resp = await client.post(
            "/team-members",
            json={"user_id": member.id, "team_id": team.id},
            headers=auth_headers(member),
        )
        assert resp.status_code == 403
