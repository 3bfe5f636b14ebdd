"""
Lookups of live (non-deleted) rows, raising NotFoundError otherwise.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.models import Project, Task
from taskgraph.exceptions import NotFoundError


async def get_live_project(session: AsyncSession, project_id: uuid.UUID) -> Project:
    """Get a project that has not been soft-deleted."""
    project = await session.get(Project, project_id)
    if project is None or project.deleted_at is not None:
        raise NotFoundError("Project", str(project_id))
    return project


async def get_live_task(
    session: AsyncSession,
    task_id: uuid.UUID,
    project_id: uuid.UUID | None = None,
) -> Task:
    """
    Get a task that has not been soft-deleted.

    When project_id is given the task must also belong to that project.
    """
    task = await session.get(Task, task_id)
    if task is None or task.deleted_at is not None:
        raise NotFoundError("Task", str(task_id))
    if project_id is not None and task.project_id != project_id:
        raise NotFoundError("Task", str(task_id))
    return task
