"""
Leaf item adapters.

The folder tree store and the content listing engine only talk to leaf items
(notes, files) through the LeafItemAdapter protocol, so a new leaf kind only
needs a new adapter.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel

from roomspace.consts import FolderType, SortKey, SortOrder
from roomspace.core.exceptions import NotFoundError
from roomspace.crud.base import sort_spec
from roomspace.crud.file import FileCRUD, file_crud
from roomspace.crud.note import NoteCRUD, note_crud
from roomspace.schemas import ContentScope, FileResponse, NoteResponse
from roomspace.utils.dispatcher import DownstreamDispatcher, dispatcher
from roomspace.utils.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class LeafItemAdapter(Protocol):
    kind: str

    async def count_in_folder(self, scope: ContentScope, folder_id: Optional[str], search: Optional[str] = None) -> int:
        ...

    async def list_in_folder(
        self,
        scope: ContentScope,
        folder_id: Optional[str],
        skip: int,
        take: int,
        sort_by: SortKey,
        sort_order: SortOrder,
        search: Optional[str] = None,
    ) -> List[BaseModel]:
        ...

    async def ids_in_folder(self, folder_id: str) -> List[str]:
        ...

    async def count_by_folders(self, folder_ids: List[str]) -> Dict[str, int]:
        ...

    async def recent_in_folder(self, folder_id: str, limit: int) -> List[BaseModel]:
        ...

    async def delete_by_id(self, item_id: str, actor_id: str) -> None:
        ...


class NoteAdapter:
    kind = "notes"

    SORT_FIELDS = {
        SortKey.NAME: "title",
        SortKey.TITLE: "title",
        SortKey.CREATED_AT: "created_at",
        SortKey.UPDATED_AT: "updated_at",
    }

    def __init__(self, crud: Optional[NoteCRUD] = None):
        self.crud = crud or note_crud

    def _owner(self, scope: ContentScope) -> Optional[str]:
        return scope.owner_id if scope.folder_type == FolderType.NOTES else None

    async def count_in_folder(self, scope: ContentScope, folder_id: Optional[str], search: Optional[str] = None) -> int:
        # Notes never sit at a room root
        if folder_id is None and scope.folder_type == FolderType.ROOM:
            return 0
        return await self.crud.count(self.crud.folder_filter(self._owner(scope), folder_id, search))

    async def list_in_folder(
        self,
        scope: ContentScope,
        folder_id: Optional[str],
        skip: int,
        take: int,
        sort_by: SortKey,
        sort_order: SortOrder,
        search: Optional[str] = None,
    ) -> List[NoteResponse]:
        if folder_id is None and scope.folder_type == FolderType.ROOM:
            return []
        sort = sort_spec(self.SORT_FIELDS[sort_by], sort_order == SortOrder.DESC)
        notes = await self.crud.list_in_folder(self._owner(scope), folder_id, skip, take, sort, search)
        return [NoteResponse.model_validate(note) for note in notes]

    async def ids_in_folder(self, folder_id: str) -> List[str]:
        return await self.crud.get_ids_in_folder(folder_id)

    async def count_by_folders(self, folder_ids: List[str]) -> Dict[str, int]:
        return await self.crud.count_by_folder(folder_ids)

    async def recent_in_folder(self, folder_id: str, limit: int) -> List[NoteResponse]:
        notes = await self.crud.list({"folder_id": folder_id}, limit=limit, sort=sort_spec("updated_at", True))
        return [NoteResponse.model_validate(note) for note in notes]

    async def delete_by_id(self, item_id: str, actor_id: str) -> None:
        note = await self.crud.get_by_id(item_id)
        if not note:
            raise NotFoundError("Note not found")
        await self.crud.delete(note)
        logger.debug(f"Note deleted - note_id: {item_id}, actor: {actor_id}")


class FileAdapter:
    kind = "files"

    SORT_FIELDS = {
        SortKey.NAME: "original_name",
        SortKey.TITLE: "original_name",
        SortKey.CREATED_AT: "created_at",
        SortKey.UPDATED_AT: "updated_at",
    }

    def __init__(self, crud: Optional[FileCRUD] = None, downstream: Optional[DownstreamDispatcher] = None):
        self.crud = crud or file_crud
        self.downstream = downstream or dispatcher

    def _scope_keys(self, scope: ContentScope):
        if scope.folder_type == FolderType.ROOM:
            return None, scope.room_id
        return scope.owner_id, None

    async def count_in_folder(self, scope: ContentScope, folder_id: Optional[str], search: Optional[str] = None) -> int:
        uploader_id, room_id = self._scope_keys(scope)
        return await self.crud.count(self.crud.folder_filter(uploader_id, room_id, folder_id, search))

    async def list_in_folder(
        self,
        scope: ContentScope,
        folder_id: Optional[str],
        skip: int,
        take: int,
        sort_by: SortKey,
        sort_order: SortOrder,
        search: Optional[str] = None,
    ) -> List[FileResponse]:
        uploader_id, room_id = self._scope_keys(scope)
        sort = sort_spec(self.SORT_FIELDS[sort_by], sort_order == SortOrder.DESC)
        files = await self.crud.list_in_folder(uploader_id, room_id, folder_id, skip, take, sort, search)
        return [FileResponse.model_validate(file) for file in files]

    async def ids_in_folder(self, folder_id: str) -> List[str]:
        return await self.crud.get_ids_in_folder(folder_id)

    async def count_by_folders(self, folder_ids: List[str]) -> Dict[str, int]:
        return await self.crud.count_by_folder(folder_ids)

    async def recent_in_folder(self, folder_id: str, limit: int) -> List[FileResponse]:
        files = await self.crud.list({"folder_id": folder_id}, limit=limit, sort=sort_spec("updated_at", True))
        return [FileResponse.model_validate(file) for file in files]

    async def delete_by_id(self, item_id: str, actor_id: str) -> None:
        """Delete the file record, then queue index cleanup without waiting for it"""
        file = await self.crud.get_by_id(item_id)
        if not file:
            raise NotFoundError("File not found")

        await self.crud.delete(file)
        logger.info(f"[FILE_DELETE] Record deleted - file_id: {item_id}, name: {file.original_name}, actor: {actor_id}")

        try:
            self.downstream.cleanup_file_index(file)
        except Exception as e:
            logger.error(f"[FILE_DELETE] Could not queue index cleanup - file_id: {item_id}, error: {str(e)}")

    async def trigger_processing(self, file) -> None:
        """Queue downstream processing (embedding) for a newly registered file"""
        try:
            self.downstream.process_file(file)
        except Exception as e:
            logger.error(f"[FILE_UPLOAD] Could not queue processing - file_id: {file.id}, error: {str(e)}")


note_adapter = NoteAdapter()
file_adapter = FileAdapter()

LEAF_ADAPTERS: List[LeafItemAdapter] = [note_adapter, file_adapter]

# Leaf kind shown next to sub-folders in each kind of tree
LISTING_ADAPTERS: Dict[FolderType, LeafItemAdapter] = {
    FolderType.NOTES: note_adapter,
    FolderType.ROOM: file_adapter,
}
