from enum import Enum

class FolderType(str, Enum):
    NOTES = "notes"
    ROOM = "room"
