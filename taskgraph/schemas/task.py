import uuid
from datetime import date, datetime
from pydantic import BaseModel, Field, computed_field, field_validator

from taskgraph.services.graph import task_weight


class TaskCreate(BaseModel):
    """Schema for creating a new task."""
    title: str
    description: str | None = None
    status: str = "todo"
    start_date: date | None = None
    end_date: date | None = None
    duration_days: int | None = Field(default=None, ge=0)
    project_id: uuid.UUID


class TaskUpdate(BaseModel):
    """Schema for updating a task."""
    title: str | None = None
    description: str | None = None
    status: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    duration_days: int | None = Field(default=None, ge=0)

    @field_validator("title", "status")
    @classmethod
    def reject_null(cls, value: str | None) -> str:
        # Omit the field to leave it unchanged; null cannot be stored
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class TaskRead(BaseModel):
    """Schema for reading a task with its computed graph weight."""
    id: uuid.UUID
    title: str
    description: str | None
    status: str
    start_date: date | None
    end_date: date | None
    duration_days: int | None
    project_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    
    @computed_field
    @property
    def weight_days(self) -> int:
        """
        Days this task contributes to a critical path.
        
        The stored duration_days wins; otherwise the span end_date - start_date
        when both are set; otherwise 0.
        """
        return task_weight(self.duration_days, self.start_date, self.end_date)
    
    model_config = {"from_attributes": True}
