from typing import Optional

from fastapi import APIRouter, Depends, Query

from roomspace.configs.settings import settings
from roomspace.consts import SortKey
from roomspace.schemas import ApiError, ApiResponse, BulkDeleteRequest, BulkDeleteResult, ContentPage, ContentQuery
from roomspace.services import content_service
from roomspace.utils import ok
from roomspace.utils.verify_token import verify_actor

router = APIRouter(
    tags=["Room content"],
    responses={
        403: {"model": ApiError, "description": "Forbidden"},
        404: {"model": ApiError, "description": "Not found"},
    },
)


async def content_query(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.CONTENT_PAGE_SIZE_DEFAULT, ge=1, le=settings.CONTENT_PAGE_SIZE_MAX),
    sort_by: SortKey = Query(SortKey.UPDATED_AT),
    sort_order: str = Query("desc", description="asc or desc (case-insensitive)"),
    search: Optional[str] = Query(None),
) -> ContentQuery:
    return ContentQuery(page=page, page_size=page_size, sort_by=sort_by, sort_order=sort_order, search=search)


@router.get("/{room_id}/content", response_model=ApiResponse[ContentPage])
async def list_room_content(
    room_id: str,
    folder_id: Optional[str] = None,
    query: ContentQuery = Depends(content_query),
    actor_id: str = Depends(verify_actor)
):
    """One page of sub-folders followed by files at the room root or inside folder_id"""
    page = await content_service.list_room_content(room_id, folder_id, query, actor_id)
    return ok(data=page, message="Room content retrieved successfully")


@router.post("/{room_id}/content/bulk-delete", response_model=ApiResponse[BulkDeleteResult])
async def bulk_delete_room_content(
    room_id: str,
    request: BulkDeleteRequest,
    actor_id: str = Depends(verify_actor)
):
    result = await content_service.bulk_delete_room_content(room_id, request, actor_id)
    return ok(data=result, message=result.message)
