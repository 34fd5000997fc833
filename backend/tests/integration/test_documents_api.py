"""
Integration tests for CV, job description, resume and template endpoints.
"""


class TestCVsAPI:
    """Owner-scoped CV CRUD."""

    async def test_cv_lifecycle(self, async_client, auth_headers):
        created = await async_client.post(
            "/api/v1/cvs",
            json={
                "name": "Main CV",
                "personalInfo": {"firstName": "Jane", "lastName": "Doe"},
                "skills": ["Python"],
            },
            headers=auth_headers,
        )
        assert created.status_code == 201
        cv_id = created.json()["data"]["id"]

        updated = await async_client.put(
            f"/api/v1/cvs/{cv_id}", json={"summary": "Backend engineer"}, headers=auth_headers
        )
        assert updated.json()["data"]["summary"] == "Backend engineer"
        assert updated.json()["data"]["skills"] == ["Python"]

        listing = await async_client.get("/api/v1/cvs", headers=auth_headers)
        assert listing.json()["data"]["total"] == 1

        deleted = await async_client.delete(f"/api/v1/cvs/{cv_id}", headers=auth_headers)
        assert deleted.status_code == 200

        missing = await async_client.get(f"/api/v1/cvs/{cv_id}", headers=auth_headers)
        assert missing.status_code == 404

    async def test_cannot_read_other_users_cv(self, async_client, admin_auth_headers, test_cv):
        response = await async_client.get(f"/api/v1/cvs/{test_cv.id}", headers=admin_auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "CV not found"


class TestJobDescriptionsAPI:

    async def test_create_coerces_location(self, async_client, auth_headers):
        response = await async_client.post(
            "/api/v1/job-descriptions",
            json={"position": "Data Engineer", "location": "Berlin", "remoteStatus": "Remote"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["location"] == ["Berlin"]

    async def test_invalid_remote_status(self, async_client, auth_headers):
        response = await async_client.post(
            "/api/v1/job-descriptions",
            json={"position": "Data Engineer", "remoteStatus": "Sometimes"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("remoteStatus must be one of")


class TestResumesCRUD:

    async def test_update_and_list(
        self, async_client, auth_headers, fake_ai, test_cv, test_job_description
    ):
        fake_ai.respond("match_resume", {"matchedSummaryContent": "Summary"})
        created = await async_client.post(
            "/api/v1/resumes/match",
            json={"cvId": test_cv.id, "jobDescriptionId": test_job_description.id, "templateId": "modernGreen"},
            headers=auth_headers,
        )
        resume_id = created.json()["data"]["id"]

        updated = await async_client.put(
            f"/api/v1/resumes/{resume_id}", json={"status": "completed"}, headers=auth_headers
        )
        assert updated.json()["data"]["status"] == "completed"

        listing = await async_client.get("/api/v1/resumes", headers=auth_headers)
        assert [item["id"] for item in listing.json()["data"]["items"]] == [resume_id]


class TestTemplatesAPI:
    """Templates are admin-managed; users only see active ones."""

    async def test_visibility(self, async_client, admin_auth_headers, auth_headers):
        for name, status in (("Professional Blue", "active"), ("Work in progress", "draft")):
            response = await async_client.post(
                "/api/v1/templates", json={"name": name, "status": status}, headers=admin_auth_headers
            )
            assert response.status_code == 201

        user_view = await async_client.get("/api/v1/templates", headers=auth_headers)
        admin_view = await async_client.get("/api/v1/templates", headers=admin_auth_headers)

        assert [t["name"] for t in user_view.json()["data"]] == ["Professional Blue"]
        assert len(admin_view.json()["data"]) == 2

    async def test_create_requires_admin(self, async_client, auth_headers):
        response = await async_client.post("/api/v1/templates", json={"name": "Mine"}, headers=auth_headers)

        assert response.status_code == 403
