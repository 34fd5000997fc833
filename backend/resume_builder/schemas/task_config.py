"""
Schemas for stored AI task configurations.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from resume_builder.models.task_config import TaskConfigType
from resume_builder.schemas.common import CamelModel

HarmCategory = Literal[
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]

BlockThreshold = Literal[
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_LOW_AND_ABOVE",
    "BLOCK_MEDIUM_AND_ABOVE",
]


class GenerationConfig(CamelModel):
    """Sampling parameters; unset fields fall back to the task default."""

    temperature: Optional[float] = Field(None, ge=0, le=2)
    top_p: Optional[float] = Field(None, ge=0, le=1)
    top_k: Optional[int] = Field(None, ge=1)
    max_output_tokens: Optional[int] = Field(None, ge=1)
    stop_sequences: Optional[List[str]] = None
    response_schema: Optional[Dict[str, Any]] = Field(
        None, description="Accepted for compatibility; the task's canonical schema always wins"
    )

    def to_stored(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SafetySetting(CamelModel):
    category: HarmCategory
    threshold: BlockThreshold


class TaskConfigCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, description="Unique human label")
    description: Optional[str] = None
    task_name: str = Field(..., min_length=1, max_length=100, description="Task this config applies to")
    model_name: str = Field("gemini-1.5-flash", min_length=1, max_length=100)
    system_instruction: Optional[str] = None
    generation_config: GenerationConfig = Field(default_factory=GenerationConfig)
    safety_settings: List[SafetySetting] = Field(default_factory=list)
    type: TaskConfigType = TaskConfigType.TOOL
    is_active: bool = True


class TaskConfigUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    task_name: Optional[str] = Field(None, min_length=1, max_length=100)
    model_name: Optional[str] = Field(None, min_length=1, max_length=100)
    system_instruction: Optional[str] = None
    generation_config: Optional[GenerationConfig] = None
    safety_settings: Optional[List[SafetySetting]] = None
    type: Optional[TaskConfigType] = None
    is_active: Optional[bool] = None


class TaskConfigResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    task_name: str
    model_name: str
    system_instruction: Optional[str] = None
    generation_config: Dict[str, Any] = Field(default_factory=dict)
    safety_settings: List[Dict[str, str]] = Field(default_factory=list)
    type: TaskConfigType
    is_active: bool
    created_at: datetime
    updated_at: datetime
