from typing import Optional

from roomspace.core.exceptions import NotFoundError
from roomspace.crud.room import RoomCRUD, RoomMemberCRUD, room_crud, room_member_crud
from roomspace.models.room import Room, RoomMember


class RoomDirectory:
    """Read side of the room/membership registry"""

    def __init__(self, rooms: Optional[RoomCRUD] = None, members: Optional[RoomMemberCRUD] = None):
        self.rooms = rooms or room_crud
        self.members = members or room_member_crud

    async def get_room(self, room_id: str) -> Room:
        room = await self.rooms.get_by_id(room_id)
        if not room:
            raise NotFoundError("Room not found")
        return room

    async def get_membership(self, room_id: str, user_id: str) -> Optional[RoomMember]:
        return await self.members.get_membership(room_id, user_id)

    async def role_in_room(self, room: Room, user_id: str) -> Optional[str]:
        """'admin', 'moderator', 'member' or None"""
        if room.admin_id == user_id:
            return "admin"
        membership = await self.get_membership(str(room.id), user_id)
        return membership.role.value if membership else None


room_directory = RoomDirectory()
