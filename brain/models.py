"""Pydantic models for the Brain task API.

Field names follow the on-disk and wire format: ``{"Id", "Title", "Completed"}``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Task(BaseModel):
    """A task as stored in ``<Id>.json``."""

    Id: int = Field(..., description="Store-assigned identifier")
    Title: str = Field(default="", description="The task title")
    Completed: bool = Field(default=False, description="Whether the task is done")


class _WirePayload(BaseModel):
    """Shared configuration for request bodies.

    Unknown fields are rejected and values are never coerced between JSON types.
    A ``null`` member counts as absent.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if value is not None or key not in cls.model_fields
            }
        return data


class TaskCreate(_WirePayload):
    """Request body for creating a task. ``Id`` is accepted but ignored."""

    Id: int | None = None
    Title: str = ""
    Completed: bool = False


class TaskPatch(_WirePayload):
    """Request body for updating a task. Absent fields are left unchanged."""

    Id: int | None = None
    Title: str | None = None
    Completed: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Return the fields this patch overwrites."""
        return self.model_dump(exclude={"Id"}, exclude_none=True)
