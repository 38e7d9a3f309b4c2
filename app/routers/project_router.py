# app/routers/project_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.routers.deps import get_project_service, require_client
from app.schemas.common import ActionResponse
from app.schemas.marketplace import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.services.marketplace import Actor, ProjectService


router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreateRequest,
    actor: Actor = Depends(require_client),
    project_service: ProjectService = Depends(get_project_service),
):
    project = project_service.create_project(
        client_id=actor.user_id,
        title=payload.title,
        description=payload.description,
        budget=payload.budget,
        deadline=payload.deadline,
        category=payload.category,
    )
    return ProjectResponse.model_validate(project)


@router.get("", response_model=ProjectListResponse)
async def list_open_projects(
    search: Optional[str] = Query(None, max_length=200),
    category: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    project_service: ProjectService = Depends(get_project_service),
):
    """Open projects accepting bids, newest first"""
    items, total = project_service.list_open_projects(search, category, page, page_size)
    return ProjectListResponse(
        items=[ProjectResponse.model_validate(p) for p in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/mine", response_model=List[ProjectResponse])
async def list_my_projects(
    actor: Actor = Depends(require_client),
    project_service: ProjectService = Depends(get_project_service),
):
    projects = project_service.list_projects_by_client(actor.user_id)
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service),
):
    return ProjectResponse.model_validate(project_service.get_project(project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    payload: ProjectUpdateRequest,
    actor: Actor = Depends(require_client),
    project_service: ProjectService = Depends(get_project_service),
):
    project = project_service.update_project(
        project_id,
        actor.user_id,
        title=payload.title,
        description=payload.description,
        budget=payload.budget,
        deadline=payload.deadline,
        category=payload.category,
    )
    return ProjectResponse.model_validate(project)


@router.post("/{project_id}/close", response_model=ProjectResponse)
async def close_project(
    project_id: int,
    actor: Actor = Depends(require_client),
    project_service: ProjectService = Depends(get_project_service),
):
    return ProjectResponse.model_validate(project_service.close_project(project_id, actor.user_id))


@router.post("/{project_id}/cancel", response_model=ProjectResponse)
async def cancel_project(
    project_id: int,
    actor: Actor = Depends(require_client),
    project_service: ProjectService = Depends(get_project_service),
):
    return ProjectResponse.model_validate(project_service.cancel_project(project_id, actor.user_id))


@router.delete("/{project_id}", response_model=ActionResponse)
async def delete_project(
    project_id: int,
    actor: Actor = Depends(require_client),
    project_service: ProjectService = Depends(get_project_service),
):
    project_service.delete_project(project_id, actor.user_id)
    return ActionResponse(success=True, message="Project deleted successfully")
