from fastapi import APIRouter, Depends

from roomspace.schemas import ApiError, ApiResponse, FileCreate, FileMove, FileResponse, FileUpdate
from roomspace.services import file_service
from roomspace.utils import created, ok
from roomspace.utils.verify_token import verify_actor

router = APIRouter(
    tags=["Files"],
    responses={
        403: {"model": ApiError, "description": "Forbidden"},
        404: {"model": ApiError, "description": "Not found"},
        409: {"model": ApiError, "description": "Conflict"},
    },
)


@router.post("", response_model=ApiResponse[FileResponse], status_code=201)
async def register_file(
    request: FileCreate,
    actor_id: str = Depends(verify_actor)
):
    """Register an uploaded file (the bytes are already in object storage) and queue its processing"""
    file = await file_service.register_file(request, actor_id)
    return created(FileResponse.model_validate(file), message="File uploaded successfully")


@router.get("/{file_id}", response_model=ApiResponse[FileResponse])
async def get_file(
    file_id: str,
    actor_id: str = Depends(verify_actor)
):
    file = await file_service.get_file(file_id, actor_id)
    return ok(data=FileResponse.model_validate(file))


@router.put("/{file_id}/rename", response_model=ApiResponse[FileResponse])
async def rename_file(
    file_id: str,
    request: FileUpdate,
    actor_id: str = Depends(verify_actor)
):
    file = await file_service.rename_file(file_id, request.original_name, actor_id)
    return ok(data=FileResponse.model_validate(file), message="File renamed successfully")


@router.put("/{file_id}/move", response_model=ApiResponse[FileResponse])
async def move_file(
    file_id: str,
    request: FileMove,
    actor_id: str = Depends(verify_actor)
):
    file = await file_service.move_file(file_id, request.folder_id, actor_id)
    return ok(data=FileResponse.model_validate(file), message="File moved successfully")


@router.delete("/{file_id}", response_model=ApiResponse[bool])
async def delete_file(
    file_id: str,
    actor_id: str = Depends(verify_actor)
):
    await file_service.delete_file(file_id, actor_id)
    return ok(data=True, message="File deleted successfully")
