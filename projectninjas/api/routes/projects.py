"""
Project endpoints.

Browsing is public; creating needs a login; editing and deleting are for the
owner only.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from projectninjas.api.deps import CurrentUser, Projects, get_client_ip
from projectninjas.schemas.common import MessageResponse
from projectninjas.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
async def list_projects(projects: Projects):
    """List all projects, newest first."""
    entries = await projects.list_projects()
    return [ProjectResponse.from_entry(entry) for entry in entries]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: Request,
    data: ProjectCreate,
    user: CurrentUser,
    projects: Projects,
):
    """Create a new project owned by the caller."""
    entry = await projects.create_project(
        owner=user,
        title=data.title,
        abstract=data.abstract,
        keywords=data.keywords,
        ip_address=get_client_ip(request),
    )
    return ProjectResponse.from_entry(entry)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: uuid.UUID, projects: Projects):
    entry = await projects.get_project(project_id)
    return ProjectResponse.from_entry(entry)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    request: Request,
    project_id: uuid.UUID,
    data: ProjectUpdate,
    user: CurrentUser,
    projects: Projects,
):
    """Update a project's title, abstract or keywords (owner only)."""
    entry = await projects.update_project(
        project_id,
        owner=user,
        title=data.title,
        abstract=data.abstract,
        keywords=data.keywords,
        ip_address=get_client_ip(request),
    )
    return ProjectResponse.from_entry(entry)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    request: Request,
    project_id: uuid.UUID,
    user: CurrentUser,
    projects: Projects,
):
    """Delete a project with its files and access requests (owner only)."""
    await projects.delete_project(project_id, user.id, ip_address=get_client_ip(request))
    return MessageResponse(message="Project and all associated files have been deleted.")
