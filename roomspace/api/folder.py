from fastapi import APIRouter, Depends

from roomspace.schemas import (
    ApiError, ApiResponse, BreadcrumbItem, FolderDeletionResult, FolderDetailResponse, FolderResponse,
    FolderUpdate, NotesFolderCreateRequest, RoomFolderCreateRequest
)
from roomspace.services import folder_service
from roomspace.utils import created, ok
from roomspace.utils.verify_token import verify_actor
from typing import List

router = APIRouter(
    tags=["Folders"],
    responses={
        403: {"model": ApiError, "description": "Forbidden"},
        404: {"model": ApiError, "description": "Not found"},
        409: {"model": ApiError, "description": "Conflict"},
    },
)


@router.post("/notes", response_model=ApiResponse[FolderResponse], status_code=201)
async def create_notes_folder(
    request: NotesFolderCreateRequest,
    actor_id: str = Depends(verify_actor)
):
    """Create a folder in the caller's personal notes tree"""
    folder = await folder_service.create_notes_folder(request.name, request.parent_id, actor_id)
    return created(FolderResponse.model_validate(folder), message="Folder created successfully")


@router.post("/room", response_model=ApiResponse[FolderResponse], status_code=201)
async def create_room_folder(
    request: RoomFolderCreateRequest,
    actor_id: str = Depends(verify_actor)
):
    """Create a folder in a room (room admin and moderators)"""
    folder = await folder_service.create_room_folder(request.name, request.room_id, request.parent_id, actor_id)
    return created(FolderResponse.model_validate(folder), message="Folder created successfully")


@router.get("/{folder_id}", response_model=ApiResponse[FolderDetailResponse])
async def get_folder(
    folder_id: str,
    actor_id: str = Depends(verify_actor)
):
    detail = await folder_service.get_folder_detail(folder_id, actor_id)
    return ok(data=detail, message="Folder retrieved successfully")


@router.get("/{folder_id}/breadcrumb", response_model=ApiResponse[List[BreadcrumbItem]])
async def get_breadcrumb(
    folder_id: str,
    actor_id: str = Depends(verify_actor)
):
    breadcrumb = await folder_service.get_breadcrumb(folder_id, actor_id)
    return ok(data=breadcrumb, message="Breadcrumb retrieved successfully")


@router.patch("/{folder_id}", response_model=ApiResponse[FolderResponse])
async def update_folder(
    folder_id: str,
    request: FolderUpdate,
    actor_id: str = Depends(verify_actor)
):
    """Rename and/or move a folder; send parent_id: null to move it to the root"""
    folder = await folder_service.update_folder(folder_id, request, actor_id)
    return ok(data=FolderResponse.model_validate(folder), message="Folder updated successfully")


@router.delete("/{folder_id}", response_model=ApiResponse[FolderDeletionResult])
async def delete_folder(
    folder_id: str,
    actor_id: str = Depends(verify_actor)
):
    """Delete a folder with all of its sub-folders and items"""
    result = await folder_service.remove(folder_id, actor_id)
    message = f"Folder deleted with {result.total} nested item(s)"
    if result.failures:
        message += f", {len(result.failures)} item(s) could not be deleted"
    return ok(data=result, message=message)
