from typing import Any, Dict, List, Optional

from roomspace.crud.base import BaseCRUD, Sort
from roomspace.crud.folder import name_search
from roomspace.models.note import Note
from roomspace.schemas import NoteCreate, NoteUpdate


class NoteCRUD(BaseCRUD[Note, NoteCreate, NoteUpdate]):
    def __init__(self):
        super().__init__(Note)

    def folder_filter(self, owner_id: Optional[str], folder_id: Optional[str], search: Optional[str] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {"folder_id": folder_id}
        # Inside a folder the folder itself pins the owner; at the root the owner must be given
        if owner_id is not None:
            query["owner_id"] = owner_id
        if search:
            query["title"] = name_search(search)
        return query

    async def list_in_folder(
        self,
        owner_id: Optional[str],
        folder_id: Optional[str],
        skip: int,
        take: int,
        sort: Sort,
        search: Optional[str] = None,
    ) -> List[Note]:
        if take <= 0:
            return []
        return await self.list(self.folder_filter(owner_id, folder_id, search), limit=take, skip=skip, sort=sort)

    async def get_ids_in_folder(self, folder_id: str) -> List[str]:
        notes = await self.model.find({"folder_id": folder_id}).to_list()
        return [str(note.id) for note in notes]

    async def count_by_folder(self, folder_ids: List[str]) -> Dict[str, int]:
        if not folder_ids:
            return {}
        return await self.count_grouped({"folder_id": {"$in": folder_ids}}, "folder_id")


note_crud = NoteCRUD()
