"""
Integration tests for the administrator endpoints: AI configs, knowledge
and activity logs.
"""

from resume_builder.models.activity_log import ActivityAction
from resume_builder.services.activity_log_service import RequestActor


class TestAIConfigsAPI:
    """Stored AI configuration management."""

    async def _create(self, client, headers, **fields):
        payload = {"name": "cv v1", "taskName": "extract_cv", **fields}
        response = await client.post("/api/v1/ai-configs", json=payload, headers=headers)
        assert response.status_code == 201
        return response.json()["data"]

    async def test_create_and_fetch(self, async_client, admin_auth_headers):
        created = await self._create(
            async_client, admin_auth_headers,
            generationConfig={"temperature": 0.4, "maxOutputTokens": 1024},
            safetySettings=[{"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"}],
        )

        assert created["isActive"] is True
        assert created["generationConfig"] == {"temperature": 0.4, "maxOutputTokens": 1024}

        response = await async_client.get("/api/v1/ai-configs/task/EXTRACT_CV", headers=admin_auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]

    async def test_activation_switch(self, async_client, admin_auth_headers):
        first = await self._create(async_client, admin_auth_headers, name="cv v1")
        second = await self._create(async_client, admin_auth_headers, name="cv v2")

        response = await async_client.post(
            f"/api/v1/ai-configs/{first['id']}/activate", headers=admin_auth_headers
        )
        assert response.status_code == 200

        listing = await async_client.get(
            "/api/v1/ai-configs", params={"taskName": "extract_cv"}, headers=admin_auth_headers
        )
        active = {item["id"]: item["isActive"] for item in listing.json()["data"]}
        assert active == {first["id"]: True, second["id"]: False}

    async def test_deactivate(self, async_client, admin_auth_headers):
        created = await self._create(async_client, admin_auth_headers)

        response = await async_client.post(
            f"/api/v1/ai-configs/{created['id']}/deactivate", headers=admin_auth_headers
        )

        assert response.json()["data"]["isActive"] is False

    async def test_duplicate_name(self, async_client, admin_auth_headers):
        await self._create(async_client, admin_auth_headers)

        response = await async_client.post(
            "/api/v1/ai-configs", json={"name": "cv v1", "taskName": "chatbot"}, headers=admin_auth_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "DUPLICATE"

    async def test_invalid_safety_threshold(self, async_client, admin_auth_headers):
        response = await async_client.post(
            "/api/v1/ai-configs",
            json={
                "name": "bad",
                "taskName": "chatbot",
                "safetySettings": [{"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ALL"}],
            },
            headers=admin_auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_update_and_delete(self, async_client, admin_auth_headers):
        created = await self._create(async_client, admin_auth_headers)

        updated = await async_client.put(
            f"/api/v1/ai-configs/{created['id']}",
            json={"modelName": "gemini-2.0-flash"},
            headers=admin_auth_headers,
        )
        assert updated.json()["data"]["modelName"] == "gemini-2.0-flash"
        assert updated.json()["data"]["isActive"] is True

        deleted = await async_client.delete(f"/api/v1/ai-configs/{created['id']}", headers=admin_auth_headers)
        assert deleted.status_code == 200

        missing = await async_client.get(f"/api/v1/ai-configs/{created['id']}", headers=admin_auth_headers)
        assert missing.status_code == 404
        assert missing.json()["code"] == "NOT_FOUND"


class TestKnowledgeAPI:
    """Knowledge management."""

    async def test_create_and_list(self, async_client, admin_auth_headers):
        response = await async_client.post(
            "/api/v1/knowledge",
            json={
                "title": "Summary rules",
                "taskName": "summary",
                "textContent": "Keep it short",
                "qaContent": [{"question": " How long? ", "answer": "Three lines"}],
                "tags": ["summary"],
                "priority": 2,
                "metadata": {"title": "Summary helper"},
            },
            headers=admin_auth_headers,
        )
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["qaContent"] == [{"question": "How long?", "answer": "Three lines"}]
        assert created["metadata"] == {"title": "Summary helper"}

        listing = await async_client.get(
            "/api/v1/knowledge", params={"taskName": "summary"}, headers=admin_auth_headers
        )
        assert [item["id"] for item in listing.json()["data"]] == [created["id"]]

        tasks = await async_client.get("/api/v1/knowledge/tasks", headers=admin_auth_headers)
        assert tasks.json()["data"] == [{"taskName": "summary", "title": "Summary helper", "description": None}]

    async def test_general_scope_rejected(self, async_client, admin_auth_headers):
        response = await async_client.post(
            "/api/v1/knowledge",
            json={"title": "Style", "taskName": "summary", "type": "GENERAL"},
            headers=admin_auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "General knowledge must have taskName GENERAL"

    async def test_update_by_task_name(self, async_client, admin_auth_headers):
        await async_client.post(
            "/api/v1/knowledge", json={"title": "Skills", "taskName": "skills"}, headers=admin_auth_headers
        )

        response = await async_client.put(
            "/api/v1/knowledge/task/skills", json={"textContent": "Hard skills first"}, headers=admin_auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["textContent"] == "Hard skills first"

    async def test_forbidden_for_user(self, async_client, auth_headers):
        response = await async_client.post(
            "/api/v1/knowledge", json={"title": "Skills", "taskName": "skills"}, headers=auth_headers
        )

        assert response.status_code == 403


class TestUserLogsAPI:
    """Activity log queries."""

    async def test_own_logs_and_stats(self, async_client, auth_headers, activity_service, test_user):
        await activity_service.record(RequestActor(test_user.id), ActivityAction.CREATE_CV)
        await activity_service.record(RequestActor(test_user.id), ActivityAction.CHATBOT_MESSAGE)
        await activity_service.record(RequestActor(test_user.id), ActivityAction.CHATBOT_MESSAGE)

        logs = await async_client.get("/api/v1/user-logs/me", headers=auth_headers)
        assert logs.status_code == 200
        assert logs.json()["data"]["total"] == 3
        assert logs.json()["data"]["items"][0]["action"] == "chatbot_message"

        stats = await async_client.get("/api/v1/user-logs/me/stats", headers=auth_headers)
        assert stats.json()["data"]["byAction"][0] == {"action": "chatbot_message", "count": 2}

    async def test_admin_filters_by_user(
        self, async_client, admin_auth_headers, activity_service, test_user, test_admin_user
    ):
        await activity_service.record(RequestActor(test_user.id), ActivityAction.LOGIN)
        await activity_service.record(RequestActor(test_admin_user.id), ActivityAction.LOGIN)

        response = await async_client.get(
            "/api/v1/user-logs", params={"userId": test_user.id}, headers=admin_auth_headers
        )

        assert response.json()["data"]["total"] == 1
        assert response.json()["data"]["items"][0]["userId"] == test_user.id

    async def test_all_logs_forbidden_for_user(self, async_client, auth_headers):
        response = await async_client.get("/api/v1/user-logs", headers=auth_headers)

        assert response.status_code == 403
