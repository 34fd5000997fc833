"""
Unit tests for intent-based routing of chat messages.
"""

import pytest

from resume_builder.models.knowledge import KnowledgeEntry, KnowledgeType
from resume_builder.models.task_config import TaskConfig
from resume_builder.services.ai.defaults import GENERAL, INTENT_DETECTION
from resume_builder.services.ai.intent import FALLBACK_RESULT, IntentRouter


@pytest.fixture
async def knowledge_tasks(db_session):
    db_session.add_all([
        KnowledgeEntry(title="CV tips", task_name="cv_tips", type=KnowledgeType.SPECIFIC,
                       description="Advice on improving a CV"),
        KnowledgeEntry(title="Retired", task_name="old_task", type=KnowledgeType.SPECIFIC, is_active=False),
    ])
    await db_session.commit()


class TestIntentRouter:
    """Classification, validation and fallbacks."""

    @pytest.fixture
    def router(self, db_session, fake_ai):
        return IntentRouter(db_session, fake_ai, history_turns=10)

    async def test_known_task(self, router, fake_ai, knowledge_tasks):
        fake_ai.respond(INTENT_DETECTION, {"intent": "improve_cv", "confidence": 0.92, "taskName": "cv_tips"})

        result = await router.classify("How can I make my CV better?")

        assert result == {"intent": "improve_cv", "confidence": 0.92, "taskName": "cv_tips"}
        prompt = fake_ai.last_call(INTENT_DETECTION)["prompt"]
        assert "cv_tips" in prompt
        assert "old_task" not in prompt

    async def test_unknown_task_routes_to_general(self, router, fake_ai, knowledge_tasks):
        fake_ai.respond(INTENT_DETECTION, {"intent": "cover_letter", "confidence": 0.95, "taskName": "old_task"})

        result = await router.classify("Write my cover letter")

        assert result == {"intent": "cover_letter", "confidence": 0.3, "taskName": GENERAL}

    @pytest.mark.parametrize("task_name", [["cv_tips"], {"name": "cv_tips"}, 7, None])
    async def test_non_string_task_routes_to_general(self, router, fake_ai, knowledge_tasks, task_name):
        fake_ai.respond(INTENT_DETECTION, {"intent": "improve_cv", "confidence": 0.9, "taskName": task_name})

        result = await router.classify("Improve CV")

        assert result == {"intent": "improve_cv", "confidence": 0.3, "taskName": GENERAL}

    async def test_general_keeps_confidence(self, router, fake_ai):
        fake_ai.respond(INTENT_DETECTION, {"intent": "small_talk", "confidence": 0.2, "taskName": GENERAL})

        result = await router.classify("hello")

        assert result == {"intent": "small_talk", "confidence": 0.2, "taskName": GENERAL}

    async def test_stored_config_task_is_active(self, router, fake_ai, db_session):
        db_session.add(TaskConfig(name="letters", task_name="cover_letter", model_name="gemini-1.5-flash",
                                  is_active=True))
        await db_session.commit()
        fake_ai.respond(INTENT_DETECTION, {"intent": "letter", "confidence": 0.8, "taskName": "cover_letter"})

        result = await router.classify("Write my cover letter")

        assert result["taskName"] == "cover_letter"

    async def test_confidence_is_clamped(self, router, fake_ai, knowledge_tasks):
        fake_ai.respond(INTENT_DETECTION, {"intent": "improve_cv", "confidence": 1.7, "taskName": "cv_tips"})

        result = await router.classify("Improve CV")

        assert result["confidence"] == 1.0

    @pytest.mark.parametrize("response", [RuntimeError("provider down"), "definitely not json"])
    async def test_failures_use_fallback(self, router, fake_ai, response):
        fake_ai.respond(INTENT_DETECTION, response)

        result = await router.classify("anything")

        assert result == FALLBACK_RESULT

    def test_recent_history_limit_and_leading_assistant(self, db_session, fake_ai):
        router = IntentRouter(db_session, fake_ai, history_turns=2)
        history = [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "second"},
            {"role": "user", "content": "third"},
        ]

        assert router.recent_history(history) == [{"role": "user", "content": "third"}]
