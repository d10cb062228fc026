import re
from typing import Any, Dict, List, Optional

from roomspace.consts import FolderType
from roomspace.crud.base import BaseCRUD, Sort
from roomspace.models.folder import Folder
from roomspace.schemas import ContentScope, FolderCreate, FolderUpdate


def name_search(term: str) -> Dict[str, Any]:
    """Case-insensitive substring match on a literal search term"""
    return {"$regex": re.escape(term), "$options": "i"}


class FolderCRUD(BaseCRUD[Folder, FolderCreate, FolderUpdate]):
    def __init__(self):
        super().__init__(Folder)

    def scope_filter(self, scope: ContentScope, parent_id: Optional[str], search: Optional[str] = None) -> Dict[str, Any]:
        """Filter for the direct children of parent_id (None = scope root) inside scope"""
        query: Dict[str, Any] = {"folder_type": scope.folder_type.value, "parent_id": parent_id}
        if scope.folder_type == FolderType.ROOM:
            query["room_id"] = scope.room_id
        else:
            query["owner_id"] = scope.owner_id
        if search:
            query["name"] = name_search(search)
        return query

    async def find_sibling(self, scope: ContentScope, parent_id: Optional[str], name: str) -> Optional[Folder]:
        """Folder with exactly this name at the given level of the scope"""
        query = self.scope_filter(scope, parent_id)
        query["name"] = name
        return await self.get_one(query)

    async def get_children(self, folder_id: str) -> List[Folder]:
        """Direct sub-folders of a folder"""
        return await self.model.find({"parent_id": folder_id}).to_list()

    async def get_children_of(self, folder_ids: List[str]) -> List[Folder]:
        """Direct sub-folders of any of the given folders"""
        if not folder_ids:
            return []
        return await self.model.find({"parent_id": {"$in": folder_ids}}).to_list()

    async def count_in_scope(self, scope: ContentScope, parent_id: Optional[str], search: Optional[str] = None) -> int:
        return await self.count(self.scope_filter(scope, parent_id, search))

    async def list_in_scope(
        self,
        scope: ContentScope,
        parent_id: Optional[str],
        skip: int,
        take: int,
        sort: Sort,
        search: Optional[str] = None,
    ) -> List[Folder]:
        if take <= 0:
            return []
        return await self.list(self.scope_filter(scope, parent_id, search), limit=take, skip=skip, sort=sort)

    async def count_children_by_parent(self, folder_ids: List[str]) -> Dict[str, int]:
        """Direct sub-folder count per folder id"""
        if not folder_ids:
            return {}
        return await self.count_grouped({"parent_id": {"$in": folder_ids}}, "parent_id")


folder_crud = FolderCRUD()
