from roomspace.crud.folder import folder_crud
from roomspace.crud.note import note_crud
from roomspace.crud.file import file_crud
from roomspace.crud.room import room_crud, room_member_crud

__all__ = ["folder_crud", "note_crud", "file_crud", "room_crud", "room_member_crud"]
