"""
Unit tests for resolving a task name to its effective AI configuration.
"""

import pytest

from resume_builder.core.exceptions import ConfigError
from resume_builder.models.task_config import TaskConfig
from resume_builder.services.ai import response_schemas
from resume_builder.services.ai.defaults import (
    CHATBOT,
    DEFAULT_SAFETY_SETTINGS,
    DEFAULT_SYSTEM_INSTRUCTION,
    EXTRACT_CV,
    EXTRACT_JOB_DESCRIPTION,
    JSON_MIME_TYPE,
    default_registry,
)
from resume_builder.services.ai.resolver import ConfigResolver


async def _store(db, **fields) -> TaskConfig:
    config = TaskConfig(**{"model_name": "gemini-2.0-flash", "is_active": True, **fields})
    db.add(config)
    await db.commit()
    await db.refresh(config)
    return config


class TestConfigResolver:
    """Overlay of stored configs on the hardcoded defaults."""

    async def test_default_used_when_nothing_stored(self, db_session):
        config = await ConfigResolver(db_session).resolve(EXTRACT_JOB_DESCRIPTION)

        assert config.source == "default"
        assert config.model_name == "gemini-1.5-flash"
        assert config.response_schema == response_schemas.JOB_DESCRIPTION_SCHEMA
        assert config.response_schema["required"] == [
            "position", "jobLevel", "employmentType", "companyName", "location", "remoteStatus",
            "experienceRequired", "department", "summary", "requirements", "responsibilities",
            "benefits", "salary", "keywords", "applicationDeadline",
        ]
        assert config.system_instruction == DEFAULT_SYSTEM_INSTRUCTION

    async def test_stored_values_overlay_defaults(self, db_session):
        stored = await _store(
            db_session,
            name="cv v2",
            task_name=EXTRACT_CV,
            generation_config={"temperature": 0.2, "topP": None},
            system_instruction="Be terse.",
        )

        config = await ConfigResolver(db_session).resolve(EXTRACT_CV)

        assert config.source == "stored"
        assert config.config_id == stored.id
        assert config.model_name == "gemini-2.0-flash"
        assert config.generation_config["temperature"] == 0.2
        assert config.generation_config["topP"] == 0.95
        assert config.generation_config["topK"] == 40
        assert config.system_instruction == "Be terse."
        assert config.safety_settings == DEFAULT_SAFETY_SETTINGS

    async def test_stored_schema_never_replaces_default(self, db_session):
        await _store(
            db_session,
            name="cv broken schema",
            task_name=EXTRACT_CV,
            generation_config={"responseSchema": {"type": "string"}, "responseMimeType": "text/plain"},
        )

        config = await ConfigResolver(db_session).resolve(EXTRACT_CV)

        assert config.response_schema == response_schemas.CV_EXTRACT_SCHEMA
        assert config.generation_config["responseMimeType"] == JSON_MIME_TYPE

    async def test_inactive_stored_config_is_ignored(self, db_session):
        await _store(db_session, name="off", task_name=EXTRACT_CV, is_active=False,
                     generation_config={"temperature": 0.1})

        config = await ConfigResolver(db_session).resolve(EXTRACT_CV)

        assert config.source == "default"
        assert config.generation_config["temperature"] == 1

    async def test_unknown_task_without_stored_config(self, db_session):
        with pytest.raises(ConfigError):
            await ConfigResolver(db_session).resolve("cover_letter")

    async def test_unknown_task_with_stored_config_uses_general(self, db_session):
        await _store(db_session, name="cover letter", task_name="cover_letter")

        config = await ConfigResolver(db_session).resolve("cover_letter")

        assert config.task_name == "cover_letter"
        assert config.response_schema == response_schemas.CHATBOT_SCHEMA

    async def test_base_task_overrides_registry_entry(self, db_session):
        config = await ConfigResolver(db_session).resolve(EXTRACT_CV, base_task=CHATBOT)

        assert config.task_name == EXTRACT_CV
        assert config.response_schema == response_schemas.CHATBOT_SCHEMA

    async def test_result_is_independent_of_registry(self, db_session):
        config = await ConfigResolver(db_session).resolve(EXTRACT_CV)
        config.generation_config["responseSchema"]["properties"].clear()

        assert default_registry.get(EXTRACT_CV).response_schema == response_schemas.CV_EXTRACT_SCHEMA
