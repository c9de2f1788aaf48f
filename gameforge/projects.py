# gameforge/projects.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from .deps import get_storage, invalid_reference, patch_fields, require_user, session_user_id
from .models import Project, User
from .schemas import MessageOut, MetricsOut, MetricsPatch, ProjectCreate, ProjectOut, ProjectPatch
from .storage import Storage

log = logging.getLogger(__name__)
router = APIRouter()


# ---------- Projects ----------
@router.get("/api/projects", response_model=List[ProjectOut])
def list_projects(storage: Storage = Depends(get_storage)):
    return storage.get_all_projects()


@router.get("/api/projects/user/{user_id}", response_model=List[ProjectOut])
def list_user_projects(user_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_projects_by_user_id(user_id)


@router.get("/api/projects/{project_id}", response_model=ProjectOut)
def get_project(project_id: str, storage: Storage = Depends(get_storage)):
    project = storage.get_project(project_id)
    if project is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Project not found")
    return project


@router.post("/api/projects", status_code=status.HTTP_201_CREATED, response_model=ProjectOut)
def create_project(body: ProjectCreate, request: Request, storage: Storage = Depends(get_storage)):
    owner_id = body.owner_id or session_user_id(request)
    if not owner_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    if storage.get_user(owner_id) is None:
        raise invalid_reference("ownerId", "Owner does not exist")

    project = Project(**body.model_dump(exclude={"owner_id"}), owner_id=owner_id)
    project = storage.create_project(project)
    log.info("Project %s created by %s", project.id, owner_id)
    return project


@router.patch("/api/projects/{project_id}", response_model=ProjectOut)
def update_project(project_id: str, body: ProjectPatch, storage: Storage = Depends(get_storage)):
    updates = patch_fields(body.model_dump(exclude_none=True))
    project = storage.update_project(project_id, updates)
    if project is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Project not found")
    return project


@router.delete("/api/projects/{project_id}", response_model=MessageOut)
def delete_project(
    project_id: str,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    project = storage.get_project(project_id)
    if project is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Project not found")
    if project.owner_id != user.id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not authorized to delete this project")

    if not storage.delete_project(project_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Project not found")
    log.info("Project %s deleted by %s", project_id, user.id)
    return {"message": "Project deleted successfully"}


# ---------- Metrics ----------
@router.get("/api/metrics/{user_id}", response_model=MetricsOut)
def get_metrics(user_id: str, storage: Storage = Depends(get_storage)):
    metrics = storage.get_metrics_by_user_id(user_id)
    if metrics is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Metrics not found")
    return metrics


@router.patch("/api/metrics/{user_id}", response_model=MetricsOut)
def update_metrics(
    user_id: str,
    body: MetricsPatch,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    if user.id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Can only update your own metrics")
    return storage.update_metrics(user_id, patch_fields(body.model_dump(exclude_none=True)))
