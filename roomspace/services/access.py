"""
Access evaluation for folders and room roots.

NOTES folders belong to exactly one user: every capability reduces to
ownership. ROOM folders inherit the caller's role in the room:

    admin      read / write / delete
    moderator  read / write / delete
    member     read
    (none)     nothing
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from roomspace.consts import FolderType, RoomMemberRole
from roomspace.core.exceptions import ForbiddenError, NotFoundError
from roomspace.crud.folder import FolderCRUD, folder_crud
from roomspace.models.folder import Folder
from roomspace.models.room import Room
from roomspace.services.room_directory import RoomDirectory, room_directory


class Capability(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


class AccessGrant(BaseModel):
    can_read: bool = False
    can_write: bool = False
    can_delete: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def full(cls) -> "AccessGrant":
        return cls(can_read=True, can_write=True, can_delete=True)

    @classmethod
    def read_only(cls) -> "AccessGrant":
        return cls(can_read=True)

    @classmethod
    def none(cls) -> "AccessGrant":
        return cls()

    def allows(self, capability: Capability) -> bool:
        return {
            Capability.READ: self.can_read,
            Capability.WRITE: self.can_write,
            Capability.DELETE: self.can_delete,
        }[capability]


class AccessEvaluator:
    def __init__(self, rooms: Optional[RoomDirectory] = None, folders: Optional[FolderCRUD] = None):
        self.rooms = rooms or room_directory
        self.folders = folders or folder_crud

    async def evaluate_room(self, actor_id: str, room: Room) -> AccessGrant:
        # The admin is not necessarily in the membership table
        if room.admin_id == actor_id:
            return AccessGrant.full()
        membership = await self.rooms.get_membership(str(room.id), actor_id)
        if membership is None:
            return AccessGrant.none()
        if membership.role == RoomMemberRole.MODERATOR:
            return AccessGrant.full()
        return AccessGrant.read_only()

    async def evaluate(self, actor_id: str, folder: Folder) -> AccessGrant:
        if folder.folder_type == FolderType.NOTES:
            return AccessGrant.full() if folder.owner_id == actor_id else AccessGrant.none()
        room = await self.rooms.get_room(folder.room_id)
        return await self.evaluate_room(actor_id, room)

    async def require_room(self, room_id: str, actor_id: str, capability: Capability) -> Room:
        """Load a room and check the actor's capability on its root"""
        room = await self.rooms.get_room(room_id)
        grant = await self.evaluate_room(actor_id, room)
        if not grant.can_read:
            raise ForbiddenError("You do not have access to this room")
        if not grant.allows(capability):
            raise ForbiddenError(f"Only room admins and moderators can {capability.value} room content")
        return room

    async def require_folder(self, folder_id: str, actor_id: str, capability: Capability) -> Folder:
        """Load a folder and check the actor's capability on it.

        A ROOM folder the actor cannot read is reported as missing, so room
        content does not leak to outsiders. A personal folder of another
        user is reported as forbidden.
        """
        folder = await self.folders.get_by_id(folder_id)
        if not folder:
            raise NotFoundError("Folder not found")

        grant = await self.evaluate(actor_id, folder)
        if not grant.can_read:
            if folder.folder_type == FolderType.ROOM:
                raise NotFoundError("Folder not found")
            raise ForbiddenError("You do not have access to this folder")
        if not grant.allows(capability):
            raise ForbiddenError(f"You do not have {capability.value} access to this folder")
        return folder


access_evaluator = AccessEvaluator()
