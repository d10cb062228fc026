from enum import Enum

class RoomMemberRole(str, Enum):
    MEMBER = "member"
    MODERATOR = "moderator"
