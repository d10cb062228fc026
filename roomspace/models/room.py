from datetime import datetime
from typing import Optional, Annotated
from beanie import Document, Indexed
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from roomspace.consts import RoomMemberRole
from roomspace.models.time_mixin import TimeMixin


class Room(Document, TimeMixin):
    """Shared room (class / workspace)"""

    title: str = Field(..., min_length=1, max_length=100, description="Room title")
    description: Optional[str] = Field(None, description="Room description")
    admin_id: Annotated[str, Indexed(str)] = Field(..., description="User who administers the room")
    is_public: bool = Field(default=False, description="Listed in public discovery")

    class Settings:
        name = "rooms"


class RoomMember(Document):
    """Membership of a non-admin user in a room"""

    room_id: Annotated[str, Indexed(str)] = Field(..., description="Room id")
    user_id: Annotated[str, Indexed(str)] = Field(..., description="Member user id")
    role: RoomMemberRole = Field(default=RoomMemberRole.MEMBER, description="Member role")
    joined_at: datetime = Field(default_factory=datetime.utcnow, description="Join timestamp")

    class Settings:
        name = "room_members"
        indexes = [
            IndexModel([("room_id", ASCENDING), ("user_id", ASCENDING)], name="room_user", unique=True),
        ]
