from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class NoteCreate(BaseModel):
    """Create a personal note, optionally inside one of the caller's NOTES folders"""
    title: Optional[str] = Field(None, max_length=200, description="Note title")
    content: str = Field("", description="Markdown / rich text body")
    folder_id: Optional[str] = Field(None, description="Target NOTES folder, omitted for the root")


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = None


class NoteMove(BaseModel):
    folder_id: Optional[str] = Field(None, description="Target NOTES folder, null for the root")


class NoteResponse(BaseModel):
    id: str
    item_type: Literal["note"] = "note"
    owner_id: str
    folder_id: Optional[str] = None
    title: Optional[str] = None
    content: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator('id', mode='before')
    @classmethod
    def convert_objectid_to_str(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v
