from datetime import datetime
from typing import Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from roomspace.consts import FolderType


class FolderCreate(BaseModel):
    """Internal schema for creating folder with all required fields"""
    name: str
    folder_type: FolderType
    owner_id: str
    room_id: Optional[str] = None
    parent_id: Optional[str] = None


class NotesFolderCreateRequest(BaseModel):
    """Create a folder in the caller's personal notes tree"""
    name: str = Field(..., min_length=1, max_length=50, description="Folder name")
    parent_id: Optional[str] = Field(None, description="Parent NOTES folder, omitted for the root")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Lecture notes",
                "parent_id": None
            }
        }
    )


class RoomFolderCreateRequest(BaseModel):
    """Create a folder inside a room"""
    name: str = Field(..., min_length=1, max_length=50, description="Folder name")
    room_id: str = Field(..., description="Room the folder belongs to")
    parent_id: Optional[str] = Field(None, description="Parent ROOM folder in the same room")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Lectures",
                "room_id": "507f1f77bcf86cd799439011",
                "parent_id": None
            }
        }
    )


class FolderUpdate(BaseModel):
    """Rename and/or move a folder; an explicit null parent_id detaches it to the root"""
    name: Optional[str] = Field(None, min_length=1, max_length=50, description="New folder name")
    parent_id: Optional[str] = Field(None, description="New parent folder id")


class FolderResponse(BaseModel):
    """Schema for returning folder information"""
    id: str
    name: str
    folder_type: FolderType
    owner_id: str
    room_id: Optional[str] = None
    parent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator('id', mode='before')
    @classmethod
    def convert_objectid_to_str(cls, v):
        """Convert ObjectId to string."""
        if isinstance(v, ObjectId):
            return str(v)
        return v


class BreadcrumbItem(BaseModel):
    id: str
    name: str
    folder_type: FolderType


class FolderSummary(FolderResponse):
    """Folder row in a content listing with its direct child counts"""
    subfolder_count: int = 0
    item_count: int = 0
    total_items: int = 0


class DeletionFailure(BaseModel):
    kind: str = Field(..., description="Item kind: folder, notes, files")
    id: str
    error: str


class FolderDeletionCounts(BaseModel):
    subfolders: int = Field(0, ge=0, description="Folders removed below the deleted folder")
    items: Dict[str, int] = Field(default_factory=dict, description="Leaf items removed, per kind")

    @property
    def total(self) -> int:
        return self.subfolders + sum(self.items.values())

    def merge(self, other: "FolderDeletionCounts") -> None:
        self.subfolders += other.subfolders
        for kind, count in other.items.items():
            self.items[kind] = self.items.get(kind, 0) + count


class FolderDeletionResult(BaseModel):
    deleted_folder: FolderResponse
    counts: FolderDeletionCounts
    total: int
    failures: List[DeletionFailure] = Field(default_factory=list)


class FolderDetailResponse(FolderResponse):
    subfolder_count: int = 0
    item_counts: Dict[str, int] = Field(default_factory=dict)
    recent_items: Dict[str, List[dict]] = Field(default_factory=dict)
    breadcrumb: List[BreadcrumbItem] = Field(default_factory=list)
