"""
Dependency routes for the taskgraph API.

Dependencies are scoped to a project through their source task.
"""

import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskgraph.database import get_session
from taskgraph.models import Task, Dependency
from taskgraph.schemas import DependencyCreate, DependencyRead
from taskgraph.services.graph import (
    check_new_dependency,
    load_project_dependencies,
    resolve_edges,
)
from taskgraph.services.locks import dependency_write_guard
from taskgraph.services.lookup import get_live_project, get_live_task
from taskgraph.exceptions import ErrorResponse, NotFoundError, TaskGraphException
from taskgraph.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=DependencyRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def create_dependency(
    project_id: uuid.UUID,
    dep_in: DependencyCreate,
    session: AsyncSession = Depends(get_session),
) -> Dependency:
    """
    Create a new dependency (edge in the task DAG).

    Both tasks must be live tasks of the project. The edge is rejected if it
    is a self-loop, if the reverse edge exists, or if the target can already
    reach the source (400 Bad Request).
    """
    source_id = dep_in.source_task_id
    target_id = dep_in.target_task_id

    logger.info(f"Creating dependency: {source_id} -> {target_id} (project={project_id})")

    await get_live_project(session, project_id)
    source = await get_live_task(session, source_id, project_id)
    target = await get_live_task(session, target_id, project_id)

    async with dependency_write_guard(project_id):
        edges = await resolve_edges(session, project_id)

        logger.debug(f"Running cycle guard over {len(edges)} edges for {source_id} -> {target_id}")
        try:
            check_new_dependency(edges, source_id, target_id)
        except TaskGraphException as exc:
            logger.warning(f"Dependency {source_id} -> {target_id} rejected: {exc.error_code}")
            raise

        dependency = Dependency(
            source_task_id=source_id,
            target_task_id=target_id,
            kind=dep_in.kind,
        )
        session.add(dependency)
        # Commit while holding the lock so the next writer sees this edge
        await session.commit()

    logger.info(
        f"Created dependency: {source.title} -> {target.title} "
        f"(id={dependency.id} kind={dependency.kind})"
    )

    return dependency


@router.get("/", response_model=list[DependencyRead])
async def list_dependencies(
    project_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> list[Dependency]:
    """List dependencies whose source task is a live task of the project."""
    await get_live_project(session, project_id)

    dependencies = await load_project_dependencies(session, project_id)

    logger.debug(f"Listed {len(dependencies)} dependencies for project={project_id}")

    return dependencies


@router.delete("/{dependency_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dependency(
    project_id: uuid.UUID,
    dependency_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> None:
    """Delete a dependency belonging to the project."""
    await get_live_project(session, project_id)

    result = await session.execute(
        select(Dependency)
        .join(Task, Task.id == Dependency.source_task_id)
        .where(Dependency.id == dependency_id, Task.project_id == project_id)
    )
    dependency = result.scalars().first()
    if not dependency:
        raise NotFoundError("Dependency", str(dependency_id))

    logger.info(
        f"Deleting dependency {dependency_id}: "
        f"{dependency.source_task_id} -> {dependency.target_task_id}"
    )

    await session.delete(dependency)
    await session.flush()
