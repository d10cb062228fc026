from roomspace.consts.folder_type import FolderType
from roomspace.consts.room_role import RoomMemberRole
from roomspace.consts.content import FileCategory, SortKey, SortOrder

__all__ = ["FolderType", "RoomMemberRole", "FileCategory", "SortKey", "SortOrder"]
