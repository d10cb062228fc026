from .room_directory import room_directory
from .access import access_evaluator
from .folder_service import folder_service
from .content_service import content_service
from .note_service import note_service
from .file_service import file_service

__all__ = ["room_directory", "access_evaluator", "folder_service", "content_service", "note_service", "file_service"]
