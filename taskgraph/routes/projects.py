"""
Project routes for the taskgraph API.
"""

import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskgraph.database import get_session
from taskgraph.models import Project, utc_now
from taskgraph.schemas import ProjectCreate, ProjectUpdate, ProjectRead, CriticalPathRead
from taskgraph.services.critical_path import CriticalPath, compute_critical_path
from taskgraph.services.lookup import get_live_project
from taskgraph.exceptions import ErrorResponse
from taskgraph.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """Create a new project."""
    project = Project(**project_in.model_dump())
    session.add(project)
    await session.flush()
    await session.refresh(project)
    
    logger.info(f"Created project: id={project.id} name='{project.name}'")
    
    return project


@router.get("/", response_model=list[ProjectRead])
async def list_projects(
    session: AsyncSession = Depends(get_session),
) -> list[Project]:
    """List all live projects."""
    result = await session.execute(
        select(Project).where(Project.deleted_at.is_(None))
    )
    projects = list(result.scalars().all())
    
    logger.debug(f"Listed {len(projects)} projects")
    
    return projects


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """Get a project by ID."""
    return await get_live_project(session, project_id)


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: uuid.UUID,
    project_in: ProjectUpdate,
    session: AsyncSession = Depends(get_session),
) -> Project:
    """Update a project."""
    project = await get_live_project(session, project_id)
    
    update_data = project_in.model_dump(exclude_unset=True)
    
    logger.info(f"Updating project {project_id}: {update_data}")
    
    for field, value in update_data.items():
        setattr(project, field, value)
    
    project.updated_at = utc_now()
    await session.flush()
    await session.refresh(project)
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> None:
    """Soft-delete a project. Its tasks and dependencies stay in storage."""
    project = await get_live_project(session, project_id)
    
    logger.info(f"Deleting project {project_id}: '{project.name}'")
    
    project.deleted_at = utc_now()
    await session.flush()


@router.get(
    "/{project_id}/critical-path",
    response_model=CriticalPathRead,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_critical_path(
    project_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> CriticalPath:
    """
    Get the project's critical path.
    
    Returns the chain of dependent tasks with the largest total duration,
    ordered from first to last. An empty project yields an empty path.
    """
    return await compute_critical_path(session, project_id)
