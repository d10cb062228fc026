from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roomspace.configs.settings import settings
from roomspace.consts import FolderType, SortKey, SortOrder
from roomspace.schemas.file import FileResponse
from roomspace.schemas.folder import BreadcrumbItem, DeletionFailure, FolderDeletionCounts, FolderResponse, FolderSummary
from roomspace.schemas.note import NoteResponse


class ContentScope(BaseModel):
    """Namespace a folder tree lives in: a user's notes or one room"""
    folder_type: FolderType
    owner_id: Optional[str] = None
    room_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def notes(cls, owner_id: str) -> "ContentScope":
        return cls(folder_type=FolderType.NOTES, owner_id=owner_id)

    @classmethod
    def room(cls, room_id: str) -> "ContentScope":
        return cls(folder_type=FolderType.ROOM, room_id=room_id)

    def contains(self, folder) -> bool:
        if folder.folder_type != self.folder_type:
            return False
        if self.folder_type == FolderType.ROOM:
            return folder.room_id == self.room_id
        return folder.owner_id == self.owner_id


class ContentQuery(BaseModel):
    page: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(
        settings.CONTENT_PAGE_SIZE_DEFAULT, ge=1, le=settings.CONTENT_PAGE_SIZE_MAX,
        description="Combined folders + items per page",
    )
    sort_by: SortKey = Field(SortKey.UPDATED_AT, description="Sort key applied to both collections")
    sort_order: SortOrder = Field(SortOrder.DESC, description="Sort direction applied to both collections")
    search: Optional[str] = Field(None, description="Case-insensitive substring filter on names")

    @field_validator('sort_order', mode='before')
    @classmethod
    def lower_sort_order(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator('search')
    @classmethod
    def blank_search_is_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()


class PageWindow(BaseModel):
    """Slice of the virtual [folders...][items...] sequence a page covers"""
    folders_skip: int
    folders_take: int
    items_skip: int
    items_take: int


class ContentTotals(BaseModel):
    folders: int
    items: int
    combined: int


class ContentPagination(BaseModel):
    page: int
    page_size: int
    total_pages: int
    sort_by: SortKey
    sort_order: SortOrder


class RoomInfo(BaseModel):
    id: str
    title: str
    user_role: Optional[str] = None


class ContentPage(BaseModel):
    folders: List[FolderSummary] = Field(default_factory=list)
    item_kind: str
    items: List[Union[NoteResponse, FileResponse]] = Field(default_factory=list)
    totals: ContentTotals
    pagination: ContentPagination
    breadcrumb: List[BreadcrumbItem] = Field(default_factory=list)
    current_folder: Optional[FolderResponse] = None
    room: Optional[RoomInfo] = None


class BulkDeleteRequest(BaseModel):
    folder_ids: List[str] = Field(default_factory=list, max_length=100)
    file_ids: List[str] = Field(default_factory=list, max_length=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "folder_ids": ["507f1f77bcf86cd799439011"],
                "file_ids": ["507f1f77bcf86cd799439012", "507f1f77bcf86cd799439013"]
            }
        }
    )


class BulkDeleteResult(BaseModel):
    deleted_folders: int = 0
    counts: FolderDeletionCounts = Field(default_factory=FolderDeletionCounts)
    total: int = 0
    failures: List[DeletionFailure] = Field(default_factory=list)
    message: str = ""


