from typing import Optional, Annotated
from beanie import Document, Indexed
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from roomspace.consts import FileCategory
from roomspace.models.time_mixin import TimeMixin


class File(Document, TimeMixin):
    """File metadata; the bytes live in external object storage"""

    original_name: Annotated[str, Indexed(str)] = Field(..., description="Name the file was uploaded with")
    file_name: str = Field(..., description="Stored object name")
    file_path: str = Field(..., description="Storage locator of the object")
    mime_type: str = Field(..., description="MIME type: text/csv, image/jpeg, etc.")
    size: int = Field(..., ge=0, description="File size (bytes)")
    file_category: FileCategory = Field(default=FileCategory.OTHER, description="Category derived from the MIME type")

    uploader_id: Annotated[str, Indexed(str)] = Field(..., description="User who uploaded the file")
    room_id: Optional[Annotated[str, Indexed(str)]] = Field(None, description="Room scope, None for personal files")
    folder_id: Optional[Annotated[str, Indexed(str)]] = Field(None, description="Containing folder, None when unfiled")

    class Settings:
        name = "files"
        indexes = [
            IndexModel([("uploader_id", ASCENDING), ("folder_id", ASCENDING)], name="uploader_folder"),
            IndexModel([("room_id", ASCENDING), ("folder_id", ASCENDING)], name="room_folder"),
        ]
