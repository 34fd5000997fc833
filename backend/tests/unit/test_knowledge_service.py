"""
Unit tests for knowledge entries and their prompt ordering.
"""

import pytest
from pydantic import ValidationError as SchemaValidationError

from resume_builder.core.exceptions import NotFoundError, ValidationError
from resume_builder.models.knowledge import KnowledgeType
from resume_builder.schemas.knowledge import KnowledgeCreate, KnowledgeUpdate
from resume_builder.services.knowledge_service import KnowledgeService


def _entry(title, task_name="summary", **fields) -> KnowledgeCreate:
    return KnowledgeCreate(title=title, task_name=task_name, **fields)


class TestKnowledgeScope:
    """GENERAL knowledge goes with the GENERAL task name and only with it."""

    def test_general_type_needs_general_task(self):
        with pytest.raises(SchemaValidationError):
            KnowledgeCreate(title="x", type=KnowledgeType.GENERAL, task_name="summary")

    def test_specific_type_rejects_general_task(self):
        with pytest.raises(SchemaValidationError):
            KnowledgeCreate(title="x", type=KnowledgeType.SPECIFIC, task_name="GENERAL")

    async def test_update_checks_final_pair(self, db_session):
        service = KnowledgeService(db_session)
        entry = await service.create(_entry("Summary rules"))

        with pytest.raises(ValidationError):
            await service.update(entry.id, KnowledgeUpdate(type=KnowledgeType.GENERAL))

    async def test_update_can_move_to_general(self, db_session):
        service = KnowledgeService(db_session)
        entry = await service.create(_entry("Summary rules"))

        updated = await service.update(
            entry.id, KnowledgeUpdate(type=KnowledgeType.GENERAL, task_name="GENERAL")
        )

        assert updated.type is KnowledgeType.GENERAL


class TestKnowledgeService:
    """Lookups used when building prompts."""

    @pytest.fixture
    def service(self, db_session):
        return KnowledgeService(db_session)

    async def test_priority_then_newest_first(self, service):
        low = await service.create(_entry("low", priority=1))
        high = await service.create(_entry("high", priority=5))
        newer_low = await service.create(_entry("newer low", priority=1))

        entries = await service.find_by_task("summary")

        assert [e.id for e in entries] == [high.id, newer_low.id, low.id]

    async def test_inactive_entries_excluded(self, service):
        await service.create(_entry("visible"))
        await service.create(_entry("hidden", is_active=False))

        assert [e.title for e in await service.find_by_task("summary")] == ["visible"]
        assert len(await service.list_entries(include_inactive=True)) == 2

    async def test_prompt_knowledge_appends_general(self, service):
        await service.create(_entry("general", task_name="GENERAL", type=KnowledgeType.GENERAL, priority=9))
        await service.create(_entry("specific"))

        titles = [k["title"] for k in await service.knowledge_for_prompt("summary", include_general=True)]

        assert titles == ["specific", "general"]
        assert [k["title"] for k in await service.knowledge_for_prompt("summary")] == ["specific"]

    async def test_tag_filter(self, service):
        await service.create(_entry("tagged", tags=["ats", "format"]))
        await service.create(_entry("untagged"))

        entries = await service.list_entries(tags=["ats"])

        assert [e.title for e in entries] == ["tagged"]

    async def test_task_descriptions_prefer_metadata(self, service):
        await service.create(_entry("Summary rules", description="How to write a summary",
                                    extra_metadata={"title": "Summary helper"}))
        await service.create(_entry("Skills", task_name="skills"))

        assert await service.task_descriptions() == [
            {"taskName": "skills", "title": "Skills", "description": None},
            {"taskName": "summary", "title": "Summary helper", "description": "How to write a summary"},
        ]

    async def test_update_by_task_name_targets_top_entry(self, service):
        await service.create(_entry("low", priority=1))
        top = await service.create(_entry("top", priority=3))

        updated = await service.update_by_task_name("summary", KnowledgeUpdate(text_content="new text"))

        assert updated.id == top.id
        assert updated.text_content == "new text"

    async def test_update_by_unknown_task_name(self, service):
        with pytest.raises(NotFoundError, match="No knowledge found with taskName: nope"):
            await service.update_by_task_name("nope", KnowledgeUpdate(title="x"))
