import uuid
from datetime import date, datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from taskgraph.models.timestamps import utc_now


class Task(SQLModel, table=True):
    """
    Task model as stored; a node in its project's dependency graph.
    
    Key fields:
    - duration_days: Explicit duration; takes priority over the date span
    - start_date / end_date: Optional timeline, used for the weight when
      no explicit duration is stored
    - deleted_at: Soft delete marker; deleted tasks leave the graph
    """
    
    __tablename__ = "tasks"
    
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(index=True)
    description: str | None = Field(default=None)
    status: str = Field(default="todo")
    start_date: date | None = Field(default=None)
    end_date: date | None = Field(default=None)
    duration_days: int | None = Field(default=None, ge=0)
    
    # Foreign keys
    project_id: uuid.UUID = Field(foreign_key="projects.id", index=True)
    
    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    deleted_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
