import uuid
from datetime import datetime
from pydantic import BaseModel

from taskgraph.models.dependency import FINISH_TO_START


class DependencyCreate(BaseModel):
    """Schema for creating a new dependency."""
    source_task_id: uuid.UUID  # Must finish first
    target_task_id: uuid.UUID  # Waits for the source
    kind: str = FINISH_TO_START


class DependencyRead(BaseModel):
    """Schema for reading a dependency."""
    id: uuid.UUID
    source_task_id: uuid.UUID
    target_task_id: uuid.UUID
    kind: str
    created_at: datetime
    
    model_config = {"from_attributes": True}
