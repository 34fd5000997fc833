"""
Request and response bodies for the text extraction endpoints.
"""

from pydantic import Field, field_validator

from resume_builder.schemas.common import CamelModel


class TextExtractRequest(CamelModel):
    text: str = Field(..., description="Raw text to extract from")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        v = str(v).strip()
        if not v:
            raise ValueError("Text content is required")
        return v


class PreprocessResult(CamelModel):
    original_text: str
    preprocessed_text: str
