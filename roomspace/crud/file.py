from roomspace.crud.base import BaseCRUD, Sort
from roomspace.crud.folder import name_search
from roomspace.models.file import File
from roomspace.schemas.file import FileCreate, FileUpdate
from typing import Any, Dict, List, Optional


class FileCRUD(BaseCRUD[File, FileCreate, FileUpdate]):
    def __init__(self):
        super().__init__(File)

    def folder_filter(
        self,
        uploader_id: Optional[str],
        room_id: Optional[str],
        folder_id: Optional[str],
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Room files are scoped by room; personal files by uploader with no room"""
        query: Dict[str, Any] = {"folder_id": folder_id}
        if room_id is not None:
            query["room_id"] = room_id
        elif uploader_id is not None:
            query["uploader_id"] = uploader_id
            query["room_id"] = None
        if search:
            pattern = name_search(search)
            query["$or"] = [{"original_name": pattern}, {"file_name": pattern}]
        return query

    async def list_in_folder(
        self,
        uploader_id: Optional[str],
        room_id: Optional[str],
        folder_id: Optional[str],
        skip: int,
        take: int,
        sort: Sort,
        search: Optional[str] = None,
    ) -> List[File]:
        if take <= 0:
            return []
        query = self.folder_filter(uploader_id, room_id, folder_id, search)
        return await self.list(query, limit=take, skip=skip, sort=sort)

    async def get_ids_in_folder(self, folder_id: str) -> List[str]:
        files = await self.model.find({"folder_id": folder_id}).to_list()
        return [str(file.id) for file in files]

    async def count_by_folder(self, folder_ids: List[str]) -> Dict[str, int]:
        if not folder_ids:
            return {}
        return await self.count_grouped({"folder_id": {"$in": folder_ids}}, "folder_id")


file_crud = FileCRUD()
