"""
Process-wide fallback configuration for every known AI task.

The registry is the single place that knows which model, sampling
parameters, system instruction and response schema each task uses when no
administrator override is active. Entries are frozen at import time and handed
out as deep copies.
"""

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from resume_builder.core.exceptions import ConfigError
from resume_builder.services.ai import response_schemas

DEFAULT_MODEL = "gemini-1.5-flash"

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant. Please follow the user's instructions carefully."
)

CHATBOT_SYSTEM_INSTRUCTION = (
    "You are a helpful CV/Resume writing assistant. "
    "Help users create and improve their CV/Resume content."
)

PREPROCESS_SYSTEM_INSTRUCTION = """You are a document analysis expert. I will provide you with scrambled or unstructured CV/resume content. Your job is to extract and reconstruct the essential data as clean key-value pairs in plain text format, with no extra formatting or special characters.
The result must be fully JSON-parser friendly and use correct grammar. Use lowercase keys with underscores (e.g., date_of_birth, programming_languages).
Only include relevant information such as name, contact info, education, skills, languages, experience, and projects.

Example output:
name: Jane Doe
location: Ho Chi Minh, Vietnam
email: jane.doe@example.com
phone: 0123456789
github: https://github.com/janedoe
objective: Final-year information technology student seeking a full-time role...
education: Information Technology, University of Technology and Education (2021-now)
project_1_title: Predicting Physical Activity
project_1_description: Classify which activities a person is performing...
project_1_language: Python
experience_1_title: Admin Manager for Information Collection Site
experience_1_company: MVC Company
experience_1_duration: Jun 2023 - Dec 2023
experience_1_description: Monitor and verify collected data...
experience_2_title: Business Analyst Intern
experience_2_company: Primas Co., Ltd.
experience_2_duration: July 2024 - January 2025
skills: python, analytical problem solving, teamwork
languages: japanese, english, vietnamese
certifications: Google Cloud Training - Core Infrastructure Fundamentals
Output only the structured CV in raw text format."""

DEFAULT_SAFETY_SETTINGS: List[Dict[str, str]] = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]

JSON_MIME_TYPE = "application/json"
TEXT_MIME_TYPE = "text/plain"

# Task names used across the application
EXTRACT_CV = "extract_cv"
EXTRACT_JOB_DESCRIPTION = "extract_job_description"
MATCH_RESUME = "match_resume"
EXTRACT_RESUME_TIPS = "extract_resume_tips"
PREPROCESS_CV = "preprocess_cv"
CHATBOT = "chatbot"
GENERAL = "GENERAL"
INTENT_DETECTION = "intent_detection"


@dataclass(frozen=True)
class DefaultConfig:
    """Hardcoded fallback for one task."""

    task_name: str
    model_name: str
    generation_config: Mapping[str, Any]
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION
    safety_settings: tuple = field(default_factory=lambda: tuple(
        MappingProxyType(dict(s)) for s in DEFAULT_SAFETY_SETTINGS
    ))

    @property
    def response_schema(self) -> Optional[Dict[str, Any]]:
        schema = self.generation_config.get("responseSchema")
        return copy.deepcopy(schema) if schema is not None else None

    @property
    def response_mime_type(self) -> str:
        return self.generation_config.get("responseMimeType", TEXT_MIME_TYPE)


@dataclass
class EffectiveConfig:
    """Configuration actually used for one AI call."""

    task_name: str
    model_name: str
    generation_config: Dict[str, Any]
    system_instruction: str
    safety_settings: List[Dict[str, str]]
    source: str = "default"
    config_id: Optional[int] = None

    @classmethod
    def from_default(cls, default: DefaultConfig, task_name: Optional[str] = None) -> "EffectiveConfig":
        return cls(
            task_name=task_name or default.task_name,
            model_name=default.model_name,
            generation_config=copy.deepcopy(dict(default.generation_config)),
            system_instruction=default.system_instruction,
            safety_settings=[dict(s) for s in default.safety_settings],
            source="default",
        )

    @property
    def response_schema(self) -> Optional[Dict[str, Any]]:
        return self.generation_config.get("responseSchema")

    @property
    def expects_json(self) -> bool:
        return self.generation_config.get("responseMimeType") == JSON_MIME_TYPE


def _generation(temperature, top_p, top_k, max_output_tokens, schema=None) -> Mapping[str, Any]:
    config: Dict[str, Any] = {
        "temperature": temperature,
        "topP": top_p,
        "topK": top_k,
        "maxOutputTokens": max_output_tokens,
    }
    if schema is not None:
        config["responseMimeType"] = JSON_MIME_TYPE
        config["responseSchema"] = schema
    else:
        config["responseMimeType"] = TEXT_MIME_TYPE
    return MappingProxyType(config)


class DefaultConfigRegistry:
    """Keyed table of task name to :class:`DefaultConfig`."""

    def __init__(self, entries: List[DefaultConfig]):
        self._entries: Mapping[str, DefaultConfig] = MappingProxyType(
            {entry.task_name: entry for entry in entries}
        )

    def has(self, task_name: str) -> bool:
        return task_name in self._entries

    def get(self, task_name: str) -> DefaultConfig:
        """
        Look up the default for a task.

        Raises:
            ConfigError: if the task is not known
        """
        try:
            return self._entries[task_name]
        except KeyError:
            raise ConfigError(
                f"No default configuration for task '{task_name}'",
                details={"taskName": task_name},
            )

    def task_names(self) -> List[str]:
        return sorted(self._entries)

    def __contains__(self, task_name: str) -> bool:
        return self.has(task_name)


_extraction = dict(temperature=1, top_p=0.95, top_k=40, max_output_tokens=8192)
_chat = dict(temperature=0.9, top_p=0.95, top_k=40, max_output_tokens=2048)

default_registry = DefaultConfigRegistry([
    DefaultConfig(
        task_name=EXTRACT_CV,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(**_extraction, schema=response_schemas.CV_EXTRACT_SCHEMA),
    ),
    DefaultConfig(
        task_name=EXTRACT_JOB_DESCRIPTION,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(**_extraction, schema=response_schemas.JOB_DESCRIPTION_SCHEMA),
    ),
    DefaultConfig(
        task_name=MATCH_RESUME,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(**_extraction, schema=response_schemas.RESUME_MATCH_SCHEMA),
    ),
    DefaultConfig(
        task_name=EXTRACT_RESUME_TIPS,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(**_extraction, schema=response_schemas.RESUME_TIPS_SCHEMA),
    ),
    DefaultConfig(
        task_name=PREPROCESS_CV,
        model_name="gemini-2.0-flash",
        generation_config=_generation(**_extraction),
        system_instruction=PREPROCESS_SYSTEM_INSTRUCTION,
    ),
    DefaultConfig(
        task_name=CHATBOT,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(**_chat, schema=response_schemas.CHATBOT_SCHEMA),
        system_instruction=CHATBOT_SYSTEM_INSTRUCTION,
    ),
    DefaultConfig(
        task_name=GENERAL,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(**_chat, schema=response_schemas.CHATBOT_SCHEMA),
        system_instruction=CHATBOT_SYSTEM_INSTRUCTION,
    ),
    DefaultConfig(
        task_name=INTENT_DETECTION,
        model_name=DEFAULT_MODEL,
        generation_config=_generation(
            temperature=0.1, top_p=0.8, top_k=10, max_output_tokens=256,
            schema=response_schemas.INTENT_SCHEMA,
        ),
    ),
])
