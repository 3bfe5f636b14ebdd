import uuid
from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import SQLModel, Field

from taskgraph.models.timestamps import utc_now


FINISH_TO_START = "finish_to_start"


class Dependency(SQLModel, table=True):
    """
    Dependency model representing a directed edge in the task DAG.
    
    source_task_id -> target_task_id means:
    "The target cannot start before the source finishes"
    
    The edge belongs to the project of its source task. Parallel edges
    between the same pair are allowed; the graph engine collapses them.
    """
    
    __tablename__ = "task_dependencies"
    __table_args__ = (
        CheckConstraint(
            "source_task_id != target_task_id",
            name="ck_task_dependencies_not_self",
        ),
    )
    
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    source_task_id: uuid.UUID = Field(foreign_key="tasks.id", index=True)
    target_task_id: uuid.UUID = Field(foreign_key="tasks.id", index=True)
    # Only finish_to_start is interpreted; other kinds are stored as given
    kind: str = Field(default=FINISH_TO_START)
    
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
