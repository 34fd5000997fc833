"""
Test configuration and shared fixtures for the resume builder.

Every test gets its own SQLite database file, a fake AI client in place of
Gemini, and an HTTP client wired to both through dependency overrides.
"""

import json
import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-jwt")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GEMINI_API_KEY", "test-api-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from typing import Any, AsyncGenerator, Dict, List

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import resume_builder.models  # noqa: F401  registers every table
from resume_builder.api.deps import get_activity_service, get_ai_client
from resume_builder.core.database import Base, get_db
from resume_builder.core.security import create_access_token, get_password_hash
from resume_builder.main import app
from resume_builder.models.cv import CV
from resume_builder.models.job_description import JobDescription
from resume_builder.models.user import User
from resume_builder.services.activity_log_service import ActivityLogService
from resume_builder.services.ai.client import AIClient


class FakeAIClient(AIClient):
    """
    Stand-in for Gemini keyed by task name.

    A response may be a string (returned verbatim), an exception (raised), or
    any other value (returned as JSON).
    """

    def __init__(self):
        self.responses: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def respond(self, task_name: str, response: Any) -> None:
        self.responses[task_name] = response

    def _answer(self, task_name: str) -> str:
        response = self.responses.get(task_name, {})
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)

    async def generate(self, config, prompt):
        self.calls.append({"mode": "generate", "config": config, "prompt": prompt})
        return self._answer(config.task_name)

    async def chat(self, config, history, message):
        self.calls.append({"mode": "chat", "config": config, "history": history, "prompt": message})
        return self._answer(config.task_name)

    def last_call(self, task_name: str) -> Dict[str, Any]:
        return [call for call in self.calls if call["config"].task_name == task_name][-1]


@pytest.fixture
async def engine(tmp_path):
    """File-backed database so request and activity-log sessions see the same data."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_ai() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def activity_service(session_factory) -> ActivityLogService:
    return ActivityLogService(session_factory)


@pytest.fixture
async def async_client(session_factory, fake_ai, activity_service) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with database, AI client and activity log overridden."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_ai_client] = lambda: fake_ai
    app.dependency_overrides[get_activity_service] = lambda: activity_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db_session) -> User:
    user = User(
        email="test@example.com",
        name="Test User",
        hashed_password=get_password_hash("testpassword123"),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_admin_user(db_session) -> User:
    admin = User(
        email="admin@example.com",
        name="Admin User",
        hashed_password=get_password_hash("adminpassword123"),
        is_active=True,
        is_admin=True,
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_auth_headers(test_admin_user):
    token = create_access_token(test_admin_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def test_cv(db_session, test_user) -> CV:
    cv = CV(
        user_id=test_user.id,
        name="Main CV",
        personal_info={"firstName": "Jane", "lastName": "Doe", "email": "jane@example.com"},
        summary="Backend Engineer with five years of Python experience.",
        experience=[{"title": "Backend Engineer", "company": "Acme", "startDate": "2020-01"}],
        skills=["Python", "FastAPI", "SQL"],
    )
    db_session.add(cv)
    await db_session.commit()
    await db_session.refresh(cv)
    return cv


@pytest.fixture
async def test_job_description(db_session, test_user) -> JobDescription:
    jd = JobDescription(
        user_id=test_user.id,
        position="Senior Python Developer",
        company_name="TechCorp",
        location=["Berlin"],
        remote_status="Hybrid",
        requirements=["5+ years Python", "FastAPI"],
        keywords=["Python", "FastAPI"],
    )
    db_session.add(jd)
    await db_session.commit()
    await db_session.refresh(jd)
    return jd


@pytest.fixture
def extracted_cv() -> Dict[str, Any]:
    """Model output for a CV extraction with no professional headline."""
    return {
        "personalInfo": {"firstName": "Jane", "lastName": "Doe", "email": "jane@example.com"},
        "summary": "Experienced engineer.",
        "education": [{"degree": "BSc Computer Science", "institution": "TU Berlin"}],
        "experience": [
            {"title": "Software Intern", "company": "Startup"},
            {"title": "Backend Engineer for Payments (remote)", "company": "Acme"},
        ],
        "skills": ["Python"],
        "projects": [],
        "certifications": [],
        "languages": [],
    }
