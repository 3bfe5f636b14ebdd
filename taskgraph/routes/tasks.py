"""
Task routes for the taskgraph API.
"""

import uuid
from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskgraph.database import get_session
from taskgraph.models import Task, utc_now
from taskgraph.schemas import TaskCreate, TaskUpdate, TaskRead
from taskgraph.services.lookup import get_live_project, get_live_task
from taskgraph.exceptions import ValidationError
from taskgraph.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _check_timeline(start_date: date | None, end_date: date | None) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValidationError(
            "end_date must be on or after start_date",
            details=[{
                "loc": ["body", "end_date"],
                "msg": f"end_date {end_date} is before start_date {start_date}",
                "type": "value_error",
            }],
        )


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    session: AsyncSession = Depends(get_session),
) -> Task:
    """Create a new task in a live project."""
    await get_live_project(session, task_in.project_id)
    _check_timeline(task_in.start_date, task_in.end_date)
    
    task = Task(**task_in.model_dump())
    session.add(task)
    await session.flush()
    await session.refresh(task)
    
    logger.info(f"Created task: id={task.id} title='{task.title}' project={task.project_id}")
    
    return task


@router.get("/", response_model=list[TaskRead])
async def list_tasks(
    project_id: uuid.UUID | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Task]:
    """
    List live tasks.
    
    Optionally filter by project_id.
    """
    query = select(Task).where(Task.deleted_at.is_(None))
    if project_id:
        query = query.where(Task.project_id == project_id)
    
    result = await session.execute(query)
    tasks = list(result.scalars().all())
    
    logger.debug(f"Listed {len(tasks)} tasks" + (f" for project={project_id}" if project_id else ""))
    
    return tasks


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> Task:
    """Get a task by ID."""
    return await get_live_task(session, task_id)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: uuid.UUID,
    task_in: TaskUpdate,
    session: AsyncSession = Depends(get_session),
) -> Task:
    """
    Update a task.
    
    Duration and date changes take effect on the next critical path query.
    """
    task = await get_live_task(session, task_id)
    
    update_data = task_in.model_dump(exclude_unset=True)
    _check_timeline(
        update_data.get("start_date", task.start_date),
        update_data.get("end_date", task.end_date),
    )
    
    logger.info(f"Updating task {task_id}: {update_data}")
    
    for field, value in update_data.items():
        setattr(task, field, value)
    
    task.updated_at = utc_now()
    
    await session.flush()
    await session.refresh(task)
    
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> None:
    """
    Soft-delete a task.
    
    The task leaves its project's dependency graph; dependency rows that
    touch it are kept but no longer take part in graph queries.
    """
    task = await get_live_task(session, task_id)
    
    logger.info(f"Deleting task {task_id}: '{task.title}'")
    
    task.deleted_at = utc_now()
    await session.flush()
