from typing import Optional

from fastapi import APIRouter, Depends

from roomspace.api.room import content_query
from roomspace.schemas import ApiError, ApiResponse, ContentPage, ContentQuery, NoteCreate, NoteMove, NoteResponse, NoteUpdate
from roomspace.services import content_service, note_service
from roomspace.utils import created, ok
from roomspace.utils.verify_token import verify_actor

router = APIRouter(
    tags=["Notes"],
    responses={
        403: {"model": ApiError, "description": "Forbidden"},
        404: {"model": ApiError, "description": "Not found"},
    },
)


@router.get("/content", response_model=ApiResponse[ContentPage])
async def list_notes_content(
    folder_id: Optional[str] = None,
    query: ContentQuery = Depends(content_query),
    actor_id: str = Depends(verify_actor)
):
    """One page of the caller's notes folders followed by notes"""
    page = await content_service.list_notes_content(actor_id, folder_id, query)
    return ok(data=page, message="Notes retrieved successfully")


@router.post("", response_model=ApiResponse[NoteResponse], status_code=201)
async def create_note(
    request: NoteCreate,
    actor_id: str = Depends(verify_actor)
):
    note = await note_service.create_note(request, actor_id)
    return created(NoteResponse.model_validate(note), message="Note created successfully")


@router.get("/{note_id}", response_model=ApiResponse[NoteResponse])
async def get_note(
    note_id: str,
    actor_id: str = Depends(verify_actor)
):
    note = await note_service.get_note(note_id, actor_id)
    return ok(data=NoteResponse.model_validate(note))


@router.patch("/{note_id}", response_model=ApiResponse[NoteResponse])
async def update_note(
    note_id: str,
    request: NoteUpdate,
    actor_id: str = Depends(verify_actor)
):
    note = await note_service.update_note(note_id, request, actor_id)
    return ok(data=NoteResponse.model_validate(note), message="Note updated successfully")


@router.put("/{note_id}/move", response_model=ApiResponse[NoteResponse])
async def move_note(
    note_id: str,
    request: NoteMove,
    actor_id: str = Depends(verify_actor)
):
    note = await note_service.move_note(note_id, request.folder_id, actor_id)
    return ok(data=NoteResponse.model_validate(note), message="Note moved successfully")


@router.delete("/{note_id}", response_model=ApiResponse[bool])
async def delete_note(
    note_id: str,
    actor_id: str = Depends(verify_actor)
):
    await note_service.delete_note(note_id, actor_id)
    return ok(data=True, message="Note deleted successfully")
