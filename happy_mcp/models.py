"""
Pydantic v2 data models for happy_mcp.
"""

import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ContentSegment(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Outcome of one tool invocation. Domain failures set is_error instead of raising."""

    content: list[ContentSegment] = Field(default_factory=list)
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(content=[ContentSegment(text=text)])

    @classmethod
    def failure(cls, text: str) -> "ToolResult":
        return cls(content=[ContentSegment(text=text)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(segment.text for segment in self.content)


class SummaryEvent(BaseModel):
    """Session message that renames the chat; sent upstream by SessionNotifier."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["summary"] = "summary"
    summary: str
    leaf_uuid: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="leafUuid")

    def to_message(self) -> dict:
        return self.model_dump(by_alias=True)
