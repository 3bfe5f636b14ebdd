import uuid
from datetime import datetime
from pydantic import BaseModel, field_validator


class ProjectCreate(BaseModel):
    """Schema for creating a new project."""
    name: str
    description: str | None = None


class ProjectUpdate(BaseModel):
    """Schema for updating a project."""
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def reject_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProjectRead(BaseModel):
    """Schema for reading a project."""
    id: uuid.UUID
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime
    
    model_config = {"from_attributes": True}


class CriticalPathRead(BaseModel):
    """The longest duration-weighted chain of dependent tasks in a project."""
    project_id: uuid.UUID
    task_ids: list[uuid.UUID]  # Ordered from first to last task in the chain
    total_duration_days: int
    
    model_config = {"from_attributes": True}
