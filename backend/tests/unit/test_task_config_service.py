"""
Unit tests for stored AI config CRUD and activation.
"""

import asyncio

import pytest
from sqlalchemy import select

from resume_builder.core.exceptions import DuplicateError, NotFoundError
from resume_builder.models.task_config import TaskConfig
from resume_builder.schemas.task_config import TaskConfigCreate, TaskConfigUpdate
from resume_builder.services.task_config_service import TaskConfigService


async def _active_ids(db, task_name):
    result = await db.execute(
        select(TaskConfig.id).where(TaskConfig.task_name == task_name, TaskConfig.is_active.is_(True))
    )
    return list(result.scalars().all())


class TestTaskConfigService:
    """Activation keeps at most one active config per task name."""

    @pytest.fixture
    def service(self, db_session):
        return TaskConfigService(db_session)

    async def test_create_active_deactivates_previous(self, service, db_session):
        first = await service.create(TaskConfigCreate(name="cv v1", task_name="extract_cv"))
        second = await service.create(TaskConfigCreate(name="cv v2", task_name="extract_cv"))

        assert await _active_ids(db_session, "extract_cv") == [second.id]
        await db_session.refresh(first)
        assert first.is_active is False

    async def test_create_inactive(self, service, db_session):
        await service.create(TaskConfigCreate(name="cv v1", task_name="extract_cv"))
        draft = await service.create(TaskConfigCreate(name="cv draft", task_name="extract_cv", is_active=False))

        assert draft.is_active is False
        assert len(await _active_ids(db_session, "extract_cv")) == 1

    async def test_activate_switches_active_config(self, service, db_session):
        first = await service.create(TaskConfigCreate(name="cv v1", task_name="extract_cv"))
        second = await service.create(TaskConfigCreate(name="cv v2", task_name="extract_cv"))

        await service.activate(first.id)

        assert await _active_ids(db_session, "extract_cv") == [first.id]
        await db_session.refresh(second)
        assert second.is_active is False

    async def test_activation_does_not_touch_other_tasks(self, service, db_session):
        await service.create(TaskConfigCreate(name="chat", task_name="chatbot"))
        await service.create(TaskConfigCreate(name="cv", task_name="extract_cv"))

        assert len(await _active_ids(db_session, "chatbot")) == 1
        assert len(await _active_ids(db_session, "extract_cv")) == 1

    async def test_deactivate_and_reactivate(self, service, db_session):
        config = await service.create(TaskConfigCreate(name="cv v1", task_name="extract_cv"))

        await service.deactivate(config.id)
        assert await _active_ids(db_session, "extract_cv") == []

        await service.activate(config.id)
        assert await _active_ids(db_session, "extract_cv") == [config.id]

    async def test_duplicate_name_rejected(self, service):
        await service.create(TaskConfigCreate(name="cv v1", task_name="extract_cv"))

        with pytest.raises(DuplicateError):
            await service.create(TaskConfigCreate(name="cv v1", task_name="chatbot"))

    async def test_update_moves_active_config_to_new_task(self, service, db_session):
        existing = await service.create(TaskConfigCreate(name="tips", task_name="extract_resume_tips"))
        moved = await service.create(TaskConfigCreate(name="cv", task_name="extract_cv"))

        updated = await service.update(moved.id, TaskConfigUpdate(task_name="extract_resume_tips"))

        assert updated.is_active is True
        assert await _active_ids(db_session, "extract_resume_tips") == [moved.id]
        assert await _active_ids(db_session, "extract_cv") == []
        await db_session.refresh(existing)
        assert existing.is_active is False

    async def test_update_generation_config(self, service):
        config = await service.create(TaskConfigCreate(name="cv", task_name="extract_cv"))

        updated = await service.update(
            config.id, TaskConfigUpdate.model_validate({"generationConfig": {"temperature": 0.3, "topK": 20}})
        )

        assert updated.generation_config == {"temperature": 0.3, "topK": 20}

    async def test_get_by_task_ignores_case_and_prefers_active(self, service):
        await service.create(TaskConfigCreate(name="Chat old", task_name="chatbot"))
        active = await service.create(TaskConfigCreate(name="Chat new", task_name="chatbot"))

        assert (await service.get_by_task("CHATBOT")).id == active.id
        assert (await service.get_by_task("chat OLD")).name == "Chat old"

    async def test_missing_config(self, service):
        with pytest.raises(NotFoundError):
            await service.get(999)
        with pytest.raises(NotFoundError):
            await service.get_by_task("nothing")

    async def test_delete(self, service):
        config = await service.create(TaskConfigCreate(name="cv", task_name="extract_cv"))

        await service.delete(config.id)

        with pytest.raises(NotFoundError):
            await service.get(config.id)

    async def test_deactivate_round_trip_keeps_other_fields(self, service, session_factory):
        created = await service.create(TaskConfigCreate.model_validate({
            "name": "jd strict",
            "description": "Low temperature extraction",
            "taskName": "extract_job_description",
            "modelName": "gemini-2.0-flash",
            "systemInstruction": "Return JSON only.",
            "generationConfig": {"temperature": 0.2, "topK": 16, "maxOutputTokens": 4096},
            "safetySettings": [{"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"}],
            "type": "TOOL",
        }))
        before = {column: getattr(created, column) for column in _COMPARED_COLUMNS}

        await service.deactivate(created.id)

        async with session_factory() as other:
            stored = await other.get(TaskConfig, created.id)
            assert stored.is_active is False
            assert {column: getattr(stored, column) for column in _COMPARED_COLUMNS} == before


_COMPARED_COLUMNS = (
    "name", "description", "task_name", "model_name", "system_instruction",
    "generation_config", "safety_settings", "type", "created_at",
)


class TestConcurrentActivation:
    """Activation through separate sessions, as separate requests would do."""

    async def _seed(self, session_factory, count):
        async with session_factory() as db:
            service = TaskConfigService(db)
            ids = []
            for n in range(count):
                config = await service.create(TaskConfigCreate(name=f"cv v{n}", task_name="extract_cv"))
                ids.append(config.id)
            return ids

    async def test_activate_with_stale_copy_of_target(self, session_factory, db_session):
        first, second = await self._seed(session_factory, 2)
        async with session_factory() as db:
            await TaskConfigService(db).activate(first)

        async with session_factory() as stale, session_factory() as other:
            stale_service = TaskConfigService(stale)
            loaded = await stale_service.get(first)
            assert loaded.is_active is True

            await TaskConfigService(other).activate(second)

            activated = await stale_service.activate(first)

        assert activated.is_active is True
        assert await _active_ids(db_session, "extract_cv") == [first]

    async def test_racing_activations_leave_exactly_one_active(self, session_factory, db_session):
        ids = await self._seed(session_factory, 5)

        async def activate(config_id):
            async with session_factory() as db:
                await TaskConfigService(db).activate(config_id)

        await asyncio.gather(*(activate(config_id) for config_id in ids))

        active = await _active_ids(db_session, "extract_cv")
        assert len(active) == 1
        assert active[0] in ids

    async def test_deactivate_with_stale_copy(self, session_factory, db_session):
        first, second = await self._seed(session_factory, 2)

        async with session_factory() as stale, session_factory() as other:
            stale_service = TaskConfigService(stale)
            loaded = await stale_service.get(first)
            assert loaded.is_active is False

            await TaskConfigService(other).activate(first)

            await stale_service.deactivate(first)

        assert await _active_ids(db_session, "extract_cv") == []
