from typing import Optional, Annotated
from beanie import Document, Indexed
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from roomspace.consts import FolderType
from roomspace.models.time_mixin import TimeMixin

class Folder(Document, TimeMixin):
    """Folder node; parent_id is the only link between nodes"""

    name: Annotated[str, Indexed(str)] = Field(..., min_length=1, max_length=50, description="Folder name")
    folder_type: FolderType = Field(..., description="NOTES (personal) or ROOM (shared); fixed at creation")
    owner_id: Annotated[str, Indexed(str)] = Field(..., description="User who created the folder")
    room_id: Optional[Annotated[str, Indexed(str)]] = Field(None, description="Room scope, set only for ROOM folders")
    parent_id: Optional[Annotated[str, Indexed(str)]] = Field(None, description="Parent folder id, None at the scope root")

    class Settings:
        name = "folders"
        indexes = [
            IndexModel(
                [("parent_id", ASCENDING), ("folder_type", ASCENDING), ("room_id", ASCENDING), ("owner_id", ASCENDING), ("name", ASCENDING)],
                name="sibling_scope_name",
            ),
        ]
