from taskgraph.schemas.project import ProjectCreate, ProjectUpdate, ProjectRead, CriticalPathRead
from taskgraph.schemas.task import TaskCreate, TaskUpdate, TaskRead
from taskgraph.schemas.dependency import DependencyCreate, DependencyRead

__all__ = [
    "ProjectCreate",
    "ProjectUpdate", 
    "ProjectRead",
    "CriticalPathRead",
    "TaskCreate",
    "TaskUpdate",
    "TaskRead",
    "DependencyCreate",
    "DependencyRead",
]
