from typing import Optional

from pydantic import BaseModel

from roomspace.crud.base import BaseCRUD
from roomspace.models.room import Room, RoomMember


class RoomCRUD(BaseCRUD[Room, BaseModel, BaseModel]):
    def __init__(self):
        super().__init__(Room)


class RoomMemberCRUD(BaseCRUD[RoomMember, BaseModel, BaseModel]):
    def __init__(self):
        super().__init__(RoomMember)

    async def get_membership(self, room_id: str, user_id: str) -> Optional[RoomMember]:
        return await self.get_one({"room_id": room_id, "user_id": user_id})


room_crud = RoomCRUD()
room_member_crud = RoomMemberCRUD()
