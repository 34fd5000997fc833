"""
Chat and intent-classification schemas.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from resume_builder.schemas.common import CamelModel


class ChatTurn(CamelModel):
    role: Literal["user", "assistant", "model"]
    content: str


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("userMessage is required")
    return v


class ChatRequest(CamelModel):
    user_message: str = Field(..., description="Message from the user")
    history: List[ChatTurn] = Field(default_factory=list)
    task_name: Optional[str] = Field(None, description="Task to use; routed by intent when omitted")
    current_data: Optional[Dict[str, Any]] = Field(None, description="CV, job description and form context")

    @field_validator("user_message")
    @classmethod
    def validate_user_message(cls, v):
        return _strip_required(v)


class IntentRequest(CamelModel):
    user_message: str
    history: List[ChatTurn] = Field(default_factory=list)

    @field_validator("user_message")
    @classmethod
    def validate_user_message(cls, v):
        return _strip_required(v)


class IntentResult(CamelModel):
    intent: str
    confidence: float = Field(..., ge=0, le=1)
    task_name: str
