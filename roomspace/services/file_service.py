from typing import Optional

from roomspace.configs.settings import settings
from roomspace.consts import FolderType
from roomspace.core.exceptions import AppError, ConflictError, ForbiddenError, NotFoundError
from roomspace.crud.file import FileCRUD, file_crud
from roomspace.crud.folder import FolderCRUD, folder_crud
from roomspace.models.file import File
from roomspace.models.folder import Folder
from roomspace.services.access import AccessEvaluator, access_evaluator
from roomspace.services.leaf_adapters import FileAdapter, file_adapter
from roomspace.schemas import FileCreate
from roomspace.utils import FileClassifier, get_logger

logger = get_logger(__name__)


class FileService:
    """File metadata lifecycle; the bytes are uploaded to object storage by the client"""

    def __init__(
        self,
        crud: Optional[FileCRUD] = None,
        folders: Optional[FolderCRUD] = None,
        access: Optional[AccessEvaluator] = None,
        adapter: Optional[FileAdapter] = None,
    ):
        self.crud = crud or file_crud
        self.folders = folders or folder_crud
        self.access = access or access_evaluator
        self.adapter = adapter or file_adapter

    async def _check_target_folder(self, folder_id: Optional[str], room_id: Optional[str], owner_id: str) -> Optional[str]:
        """Room files go in ROOM folders of the same room, personal files in the owner's NOTES folders"""
        if not folder_id:
            return None
        folder: Optional[Folder] = await self.folders.get_by_id(folder_id)
        if not folder:
            raise NotFoundError("Folder not found")
        if room_id:
            if folder.folder_type != FolderType.ROOM or folder.room_id != room_id:
                raise ConflictError("Folder must belong to the same room", field="folder_id")
        else:
            if folder.folder_type != FolderType.NOTES:
                raise ConflictError("Personal files can only be placed in notes folders", field="folder_id")
            if folder.owner_id != owner_id:
                raise ForbiddenError("You can only put files in your own folders")
        return str(folder.id)

    async def _get_managed_file(self, file_id: str, actor_id: str) -> File:
        """Load a file the actor may change: the uploader, or a room admin / moderator"""
        file = await self.crud.get_by_id(file_id)
        if not file:
            raise NotFoundError("File not found")
        if file.uploader_id == actor_id:
            return file
        if not file.room_id:
            raise ForbiddenError("You can only manage your own files")

        room = await self.access.rooms.get_room(file.room_id)
        grant = await self.access.evaluate_room(actor_id, room)
        if not grant.can_read:
            raise NotFoundError("File not found")
        if not grant.can_write:
            raise ForbiddenError("Only the uploader or room admins and moderators can manage this file")
        return file

    async def get_file(self, file_id: str, actor_id: str) -> File:
        file = await self.crud.get_by_id(file_id)
        if not file:
            raise NotFoundError("File not found")
        if file.room_id:
            room = await self.access.rooms.get_room(file.room_id)
            grant = await self.access.evaluate_room(actor_id, room)
            if not grant.can_read:
                raise NotFoundError("File not found")
        elif file.uploader_id != actor_id:
            raise ForbiddenError("You can only access your own files")
        return file

    async def register_file(self, data: FileCreate, actor_id: str) -> File:
        """Record an uploaded file and queue its processing"""
        room_id = None
        if data.room_id:
            room = await self.access.rooms.get_room(data.room_id)
            grant = await self.access.evaluate_room(actor_id, room)
            if not grant.can_read:
                raise ForbiddenError("You must be a member of this room to upload files")
            room_id = str(room.id)

        folder_id = await self._check_target_folder(data.folder_id, room_id, actor_id)
        category = FileClassifier.get_file_category(data.mime_type)

        file = await self.crud.create({
            **data.model_dump(exclude={"room_id", "folder_id"}),
            "file_category": category,
            "uploader_id": actor_id,
            "room_id": room_id,
            "folder_id": folder_id,
        })
        logger.info(
            f"[FILE_UPLOAD] File registered - file_id: {file.id}, name: {file.original_name}, "
            f"category: {category.value}, room: {room_id}, folder: {folder_id}, uploader: {actor_id}"
        )

        if settings.FILE_PROCESSING_ENABLED:
            await self.adapter.trigger_processing(file)
        return file

    async def move_file(self, file_id: str, folder_id: Optional[str], actor_id: str) -> File:
        file = await self._get_managed_file(file_id, actor_id)
        folder_id = await self._check_target_folder(folder_id, file.room_id, file.uploader_id)
        file = await self.crud.update(file, {"folder_id": folder_id})
        logger.info(f"File moved - file_id: {file_id}, folder: {folder_id}, actor: {actor_id}")
        return file

    async def rename_file(self, file_id: str, new_name: str, actor_id: str) -> File:
        file = await self._get_managed_file(file_id, actor_id)
        name = (new_name or "").strip()
        if not name:
            raise AppError("File name cannot be empty", field="original_name")
        file = await self.crud.update(file, {"original_name": name})
        logger.info(f"File renamed - file_id: {file_id}, name: {name}, actor: {actor_id}")
        return file

    async def delete_file(self, file_id: str, actor_id: str) -> None:
        logger.info(f"[FILE_DELETE] Starting deletion - file_id: {file_id}, actor: {actor_id}")
        await self._get_managed_file(file_id, actor_id)
        await self.adapter.delete_by_id(file_id, actor_id)


file_service = FileService()
