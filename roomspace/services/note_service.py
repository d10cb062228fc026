from typing import Optional

from roomspace.consts import FolderType
from roomspace.core.exceptions import ForbiddenError, NotFoundError
from roomspace.crud.folder import FolderCRUD, folder_crud
from roomspace.crud.note import NoteCRUD, note_crud
from roomspace.models.note import Note
from roomspace.schemas import NoteCreate, NoteUpdate
from roomspace.services.leaf_adapters import NoteAdapter, note_adapter
from roomspace.utils import get_logger

logger = get_logger(__name__)


class NoteService:
    def __init__(
        self,
        crud: Optional[NoteCRUD] = None,
        folders: Optional[FolderCRUD] = None,
        adapter: Optional[NoteAdapter] = None,
    ):
        self.crud = crud or note_crud
        self.folders = folders or folder_crud
        self.adapter = adapter or note_adapter

    async def _check_target_folder(self, folder_id: Optional[str], actor_id: str) -> Optional[str]:
        """Notes may only be filed in the actor's own NOTES folders"""
        if not folder_id:
            return None
        folder = await self.folders.get_by_id(folder_id)
        if not folder:
            raise NotFoundError("Folder not found")
        if folder.folder_type != FolderType.NOTES or folder.owner_id != actor_id:
            raise ForbiddenError("You can only put notes in your own notes folders")
        return str(folder.id)

    async def get_note(self, note_id: str, actor_id: str) -> Note:
        note = await self.crud.get_by_id(note_id)
        if not note:
            raise NotFoundError("Note not found")
        if note.owner_id != actor_id:
            raise ForbiddenError("You can only access your own notes")
        return note

    async def create_note(self, data: NoteCreate, actor_id: str) -> Note:
        folder_id = await self._check_target_folder(data.folder_id, actor_id)
        note = await self.crud.create({
            "owner_id": actor_id,
            "folder_id": folder_id,
            "title": data.title,
            "content": data.content,
        })
        logger.info(f"Note created - id: {note.id}, folder: {folder_id}, owner: {actor_id}")
        return note

    async def update_note(self, note_id: str, data: NoteUpdate, actor_id: str) -> Note:
        note = await self.get_note(note_id, actor_id)
        return await self.crud.update(note, data)

    async def move_note(self, note_id: str, folder_id: Optional[str], actor_id: str) -> Note:
        note = await self.get_note(note_id, actor_id)
        folder_id = await self._check_target_folder(folder_id, actor_id)
        note = await self.crud.update(note, {"folder_id": folder_id})
        logger.info(f"Note moved - id: {note_id}, folder: {folder_id}, owner: {actor_id}")
        return note

    async def delete_note(self, note_id: str, actor_id: str) -> None:
        await self.get_note(note_id, actor_id)
        await self.adapter.delete_by_id(note_id, actor_id)


note_service = NoteService()
