from roomspace.schemas.response import ApiResponse, ApiError, ErrorDetail, HealthCheck
from roomspace.schemas.folder import (
    FolderCreate, NotesFolderCreateRequest, RoomFolderCreateRequest, FolderUpdate, FolderResponse,
    BreadcrumbItem, FolderSummary, DeletionFailure, FolderDeletionCounts, FolderDeletionResult,
    FolderDetailResponse
)
from roomspace.schemas.note import NoteCreate, NoteUpdate, NoteMove, NoteResponse
from roomspace.schemas.file import FileCreate, FileUpdate, FileMove, FileResponse
from roomspace.schemas.content import (
    ContentScope, ContentQuery, PageWindow, ContentTotals, ContentPagination, RoomInfo, ContentPage,
    BulkDeleteRequest, BulkDeleteResult
)

__all__ = [
    "ApiResponse",
    "ApiError",
    "ErrorDetail",
    "HealthCheck",
    # Folder schemas
    "FolderCreate",
    "NotesFolderCreateRequest",
    "RoomFolderCreateRequest",
    "FolderUpdate",
    "FolderResponse",
    "BreadcrumbItem",
    "FolderSummary",
    "DeletionFailure",
    "FolderDeletionCounts",
    "FolderDeletionResult",
    "FolderDetailResponse",
    # Leaf item schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteMove",
    "NoteResponse",
    "FileCreate",
    "FileUpdate",
    "FileMove",
    "FileResponse",
    # Content listing schemas
    "ContentScope",
    "ContentQuery",
    "PageWindow",
    "ContentTotals",
    "ContentPagination",
    "RoomInfo",
    "ContentPage",
    "BulkDeleteRequest",
    "BulkDeleteResult",
]
