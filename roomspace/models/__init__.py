from roomspace.models.time_mixin import TimeMixin
from roomspace.models.folder import Folder
from roomspace.models.note import Note
from roomspace.models.file import File
from roomspace.models.room import Room, RoomMember

__all__ = [
    "TimeMixin",
    "Folder",
    "Note",
    "File",
    "Room",
    "RoomMember",
]

# List of all document models for Beanie initialization
DOCUMENT_MODELS = [
    Folder,
    Note,
    File,
    Room,
    RoomMember,
]
