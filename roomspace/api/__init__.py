from roomspace.api.folder import router as folder_router
from roomspace.api.room import router as room_router
from roomspace.api.note import router as note_router
from roomspace.api.file import router as file_router

__all__ = ["folder_router", "room_router", "note_router", "file_router"]
