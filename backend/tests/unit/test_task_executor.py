"""
Unit tests for running AI tasks end to end against a fake client.
"""

import asyncio

import pytest
from sqlalchemy import select

from resume_builder.core.exceptions import AIProcessingError, ResponseParseError
from resume_builder.models.activity_log import ActivityAction, ActivityLog
from resume_builder.models.knowledge import KnowledgeEntry, KnowledgeType
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor
from resume_builder.services.ai.client import AIClient
from resume_builder.services.ai.defaults import EXTRACT_CV, GENERAL, PREPROCESS_CV
from resume_builder.services.ai.executor import (
    TaskExecutor,
    parse_json_response,
    to_provider_history,
    without_leading_assistant,
)


class SlowClient(AIClient):
    async def generate(self, config, prompt):
        await asyncio.sleep(1)
        return "{}"


def _broken_session_factory():
    raise RuntimeError("database unavailable")


async def _logs(db, action):
    result = await db.execute(select(ActivityLog).where(ActivityLog.action == action))
    return list(result.scalars().all())


class TestResponseHelpers:
    """Parsing and history helpers."""

    def test_parse_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_parse_fenced_json(self):
        assert parse_json_response('```json\n{"a": [1, 2]}\n```') == {"a": [1, 2]}

    def test_parse_failure_keeps_raw_text(self):
        with pytest.raises(ResponseParseError) as exc_info:
            parse_json_response("Sorry, I cannot help with that")
        assert exc_info.value.raw_text == "Sorry, I cannot help with that"
        assert exc_info.value.to_dict()["rawResponse"] == "Sorry, I cannot help with that"

    def test_leading_assistant_turn_dropped(self):
        history = [
            {"role": "assistant", "content": "Hi, how can I help?"},
            {"role": "user", "content": "Fix my summary"},
        ]
        assert without_leading_assistant(history) == [{"role": "user", "content": "Fix my summary"}]

    def test_history_starting_with_user_untouched(self):
        history = [{"role": "user", "content": "a"}, {"role": "assistant", "content": "b"}]
        assert without_leading_assistant(history) == history

    def test_provider_history_roles(self):
        history = [
            {"role": "assistant", "content": "Welcome"},
            {"role": "user", "content": "Help"},
            {"role": "assistant", "content": "Sure"},
        ]
        assert to_provider_history(history) == [
            {"role": "user", "parts": ["Help"]},
            {"role": "model", "parts": ["Sure"]},
        ]


class TestTaskExecutor:
    """Task execution with activity logging."""

    @pytest.fixture
    def executor(self, db_session, fake_ai, activity_service):
        return TaskExecutor(db_session, fake_ai, activity=activity_service)

    @pytest.fixture
    def actor(self, test_user):
        return RequestActor(user_id=test_user.id, ip_address="127.0.0.1", user_agent="pytest")

    async def test_extract_cv_repairs_headline(self, executor, fake_ai, actor, db_session, extracted_cv):
        fake_ai.respond(EXTRACT_CV, extracted_cv)

        data = await executor.extract_cv("Jane Doe, engineer", actor)

        assert data["personalInfo"]["professionalHeadline"] == "Backend Engineer"
        assert fake_ai.last_call(EXTRACT_CV)["mode"] == "generate"
        assert "Jane Doe, engineer" in fake_ai.last_call(EXTRACT_CV)["prompt"]

        logs = await _logs(db_session, ActivityAction.EXTRACT_CV_FROM_TEXT)
        assert len(logs) == 1
        assert logs[0].details["success"] is True
        assert logs[0].details["extractedData"]["experienceCount"] == 2

    async def test_unparseable_response_is_logged_and_raised(self, executor, fake_ai, actor, db_session):
        fake_ai.respond(EXTRACT_CV, "not json")

        with pytest.raises(ResponseParseError) as exc_info:
            await executor.extract_cv("some cv", actor)

        assert exc_info.value.raw_text == "not json"
        logs = await _logs(db_session, ActivityAction.EXTRACT_CV_FROM_TEXT)
        assert logs[0].details["success"] is False

    async def test_client_failure_becomes_ai_processing_error(self, executor, fake_ai):
        fake_ai.respond(EXTRACT_CV, RuntimeError("quota exceeded"))

        with pytest.raises(AIProcessingError) as exc_info:
            await executor.extract_cv("some cv")
        assert exc_info.value.details["error"] == "quota exceeded"

    async def test_timeout(self, db_session):
        executor = TaskExecutor(db_session, SlowClient(), timeout=0.01)

        with pytest.raises(AIProcessingError, match="timed out"):
            await executor.extract_cv("some cv")

    async def test_logging_failure_does_not_mask_result(self, db_session, fake_ai, actor, extracted_cv):
        executor = TaskExecutor(db_session, fake_ai, activity=ActivityLogService(_broken_session_factory))
        fake_ai.respond(EXTRACT_CV, extracted_cv)

        data = await executor.extract_cv("text", actor)

        assert data["personalInfo"]["firstName"] == "Jane"

    async def test_preprocess_returns_plain_text(self, executor, fake_ai):
        fake_ai.respond(PREPROCESS_CV, "  name: Jane Doe\nemail: jane@example.com \n")

        result = await executor.preprocess_cv("Jane  Doe jane@example.com")

        assert result == {
            "originalText": "Jane  Doe jane@example.com",
            "preprocessedText": "name: Jane Doe\nemail: jane@example.com",
        }
        assert fake_ai.last_call(PREPROCESS_CV)["prompt"] == "Jane  Doe jane@example.com"

    async def test_chat_falls_back_to_raw_text(self, executor, fake_ai, actor, db_session):
        fake_ai.respond(GENERAL, "Just add more numbers to your achievements.")

        output = await executor.chat("How do I improve?", GENERAL, [], None, actor)

        assert output == {
            "outputMessage": "Just add more numbers to your achievements.",
            "currentTask": GENERAL,
        }
        logs = await _logs(db_session, ActivityAction.CHATBOT_MESSAGE)
        assert logs[0].details["taskName"] == GENERAL

    async def test_chat_replays_history_and_knowledge(self, executor, fake_ai, db_session):
        db_session.add_all([
            KnowledgeEntry(title="Summary rules", task_name="summary", type=KnowledgeType.SPECIFIC,
                           text_content="Keep it under 60 words"),
            KnowledgeEntry(title="House style", task_name=GENERAL, type=KnowledgeType.GENERAL,
                           text_content="Always be polite"),
        ])
        await db_session.commit()
        fake_ai.respond("summary", {"outputMessage": "Here is a shorter summary", "actionRequired": None})

        output = await executor.chat(
            "Shorten it",
            "summary",
            [{"role": "assistant", "content": "Hello"}, {"role": "user", "content": "Hi"}],
        )

        assert output["currentTask"] == "summary"
        call = fake_ai.last_call("summary")
        assert call["mode"] == "chat"
        assert call["history"] == [{"role": "user", "parts": ["Hi"]}]
        assert call["prompt"].index("Summary rules") < call["prompt"].index("House style")
