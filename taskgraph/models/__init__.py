from taskgraph.models.timestamps import utc_now
from taskgraph.models.project import Project
from taskgraph.models.task import Task
from taskgraph.models.dependency import Dependency, FINISH_TO_START

__all__ = ["Project", "Task", "Dependency", "FINISH_TO_START", "utc_now"]
