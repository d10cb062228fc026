from typing import Optional, Annotated
from beanie import Document, Indexed
from pydantic import Field
from roomspace.models.time_mixin import TimeMixin


class Note(Document, TimeMixin):
    """Personal note; lives at the owner's notes root or inside one of their NOTES folders"""

    owner_id: Annotated[str, Indexed(str)] = Field(..., description="User who owns the note")
    folder_id: Optional[Annotated[str, Indexed(str)]] = Field(None, description="Containing NOTES folder, None when unfiled")
    title: Optional[str] = Field(None, max_length=200, description="Note title")
    content: str = Field(default="", description="Markdown / rich text body")

    class Settings:
        name = "notes"
