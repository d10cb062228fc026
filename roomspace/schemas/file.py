from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Literal, Optional
from datetime import datetime
from bson import ObjectId

from roomspace.consts import FileCategory


class FileCreate(BaseModel):
    """Schema for registering uploaded file metadata (bytes are already in storage)"""
    original_name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    file_name: str = Field(..., min_length=1, description="Stored object name")
    file_path: str = Field(..., min_length=1, description="Storage locator")
    mime_type: str = Field(..., description="File MIME type")
    size: int = Field(..., ge=0, description="File size in bytes")
    room_id: Optional[str] = Field(None, description="Room scope, omitted for personal files")
    folder_id: Optional[str] = Field(None, description="Target folder, omitted for the scope root")

    @field_validator('original_name')
    @classmethod
    def validate_original_name(cls, v):
        if not v.strip():
            raise ValueError("File name cannot be empty")
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "original_name": "syllabus.pdf",
                "file_name": "a1b2c3.pdf",
                "file_path": "room-files/507f1f77bcf86cd799439011/a1b2c3.pdf",
                "mime_type": "application/pdf",
                "size": 1024000,
                "room_id": "507f1f77bcf86cd799439011",
                "folder_id": None
            }
        }
    )


class FileUpdate(BaseModel):
    """Schema for renaming an existing file"""
    original_name: str = Field(..., min_length=1, max_length=255, description="New display name")


class FileMove(BaseModel):
    folder_id: Optional[str] = Field(None, description="Target folder, null for the scope root")


class FileResponse(BaseModel):
    """Schema for returning file information"""
    id: str = Field(..., description="Unique file identifier")
    item_type: Literal["file"] = "file"
    original_name: str
    file_name: str
    file_path: str
    mime_type: str
    size: int
    file_category: FileCategory
    uploader_id: str
    room_id: Optional[str] = None
    folder_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator('id', mode='before')
    @classmethod
    def convert_objectid_to_str(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v
