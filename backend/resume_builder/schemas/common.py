"""
Shared schema bases and response envelopes.

Request and response bodies use camelCase keys on the wire and snake_case
attributes in Python.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema accepting and emitting camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Page(CamelModel, Generic[T]):
    """One page of a listing."""

    items: List[T]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)


def success(data: Any = None, message: Optional[str] = None, key: str = "data") -> Dict[str, Any]:
    """Build the ``{status, data|output, message}`` success envelope."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    payload: Dict[str, Any] = {"status": "success", key: data}
    if message:
        payload["message"] = message
    return payload
