"""Input models for the tools this server exposes.

Each model doubles as the tool's declared inputSchema (via model_json_schema)
and as the validator the registry runs before calling a handler.
Unknown keys are dropped rather than rejected.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class ChangeTitleInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., description="The new title for the chat session")


class InjectReminderInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # task_id is declared first so the message check can see it
    task_id: Optional[str] = Field(
        default=None, description="Optional background task ID to reference"
    )
    message: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="The reminder message to inject (required unless task_id is given)",
    )

    @field_validator("message")
    @classmethod
    def require_message_or_task(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None and not info.data.get("task_id"):
            raise ValueError("message is required when task_id is not given")
        return value
