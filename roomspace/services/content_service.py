"""
Content listing engine.

A listing is one virtual sequence per (scope, parent folder):

    [sub-folders sorted by key] [leaf items sorted by key]

and a page is a window over that sequence. Folders and items live in separate
collections, so each page issues at most one bounded query per collection
instead of loading either side in full.
"""

import math
from typing import List, Optional

from roomspace.consts import SortKey, SortOrder
from roomspace.core.exceptions import InternalInconsistencyError, NotFoundError
from roomspace.crud.base import sort_spec
from roomspace.crud.file import FileCRUD, file_crud
from roomspace.models.folder import Folder
from roomspace.schemas import (
    BulkDeleteRequest, BulkDeleteResult, ContentPage, ContentPagination, ContentQuery, ContentScope,
    ContentTotals, DeletionFailure, FolderDeletionCounts, FolderResponse, FolderSummary, PageWindow, RoomInfo
)
from roomspace.services.access import Capability
from roomspace.services.folder_service import FolderService, folder_service
from roomspace.services.leaf_adapters import LISTING_ADAPTERS, FileAdapter, LeafItemAdapter, file_adapter
from roomspace.utils import get_logger, log_with_context

logger = get_logger(__name__)

FOLDER_SORT_FIELDS = {
    SortKey.NAME: "name",
    SortKey.TITLE: "name",
    SortKey.CREATED_AT: "created_at",
    SortKey.UPDATED_AT: "updated_at",
}


def split_page_window(page: int, page_size: int, total_folders: int, total_items: int) -> PageWindow:
    """Split page number `page` of the folders-then-items sequence into one slice per collection.

    >>> split_page_window(2, 20, 25, 10)
    PageWindow(folders_skip=20, folders_take=5, items_skip=0, items_take=10)
    """
    skip = (page - 1) * page_size
    folders_skip = min(skip, total_folders)
    folders_take = max(0, min(page_size, total_folders - folders_skip))
    items_skip = max(0, skip - total_folders)
    items_take = max(0, min(page_size - folders_take, total_items - items_skip))
    return PageWindow(
        folders_skip=folders_skip,
        folders_take=folders_take,
        items_skip=items_skip,
        items_take=items_take,
    )


class ContentService:
    def __init__(
        self,
        folders: Optional[FolderService] = None,
        adapters: Optional[dict] = None,
        files: Optional[FileCRUD] = None,
        file_items: Optional[FileAdapter] = None,
    ):
        self.folders = folders or folder_service
        self.adapters = adapters or LISTING_ADAPTERS
        self.files = files or file_crud
        self.file_items = file_items or file_adapter

    @property
    def access(self):
        return self.folders.access

    async def _summarize(self, folders: List[Folder], adapter: LeafItemAdapter) -> List[FolderSummary]:
        """Attach direct child counts to each listed folder, one grouped query per collection"""
        ids = [str(folder.id) for folder in folders]
        subfolders = await self.folders.crud.count_children_by_parent(ids)
        items = await adapter.count_by_folders(ids)

        summaries = []
        for folder in folders:
            folder_id = str(folder.id)
            subfolder_count = subfolders.get(folder_id, 0)
            item_count = items.get(folder_id, 0)
            summaries.append(FolderSummary(
                **FolderResponse.model_validate(folder).model_dump(),
                subfolder_count=subfolder_count,
                item_count=item_count,
                total_items=subfolder_count + item_count,
            ))
        return summaries

    async def list_content(
        self,
        scope: ContentScope,
        folder_id: Optional[str],
        query: ContentQuery,
        actor_id: str,
    ) -> ContentPage:
        current_folder = None
        breadcrumb = []
        if folder_id:
            folder = await self.access.require_folder(folder_id, actor_id, Capability.READ)
            if not scope.contains(folder):
                raise NotFoundError("Folder not found")
            folder_id = str(folder.id)
            current_folder = FolderResponse.model_validate(folder)
            breadcrumb = await self.folders.ancestry_of(folder)
        else:
            folder_id = None

        adapter = self.adapters[scope.folder_type]
        total_folders = await self.folders.crud.count_in_scope(scope, folder_id, query.search)
        total_items = await adapter.count_in_folder(scope, folder_id, query.search)
        window = split_page_window(query.page, query.page_size, total_folders, total_items)

        descending = query.sort_order == SortOrder.DESC
        folders = await self.folders.crud.list_in_scope(
            scope, folder_id, window.folders_skip, window.folders_take,
            sort_spec(FOLDER_SORT_FIELDS[query.sort_by], descending), query.search,
        )
        items = await adapter.list_in_folder(
            scope, folder_id, window.items_skip, window.items_take,
            query.sort_by, query.sort_order, query.search,
        )

        combined = total_folders + total_items
        logger.debug(
            f"Content listed - scope: {scope.folder_type.value}, folder: {folder_id}, page: {query.page}, "
            f"folders: {len(folders)}/{total_folders}, {adapter.kind}: {len(items)}/{total_items}"
        )
        return ContentPage(
            folders=await self._summarize(folders, adapter),
            item_kind=adapter.kind,
            items=items,
            totals=ContentTotals(folders=total_folders, items=total_items, combined=combined),
            pagination=ContentPagination(
                page=query.page,
                page_size=query.page_size,
                total_pages=math.ceil(combined / query.page_size),
                sort_by=query.sort_by,
                sort_order=query.sort_order,
            ),
            breadcrumb=breadcrumb,
            current_folder=current_folder,
        )

    async def list_room_content(
        self,
        room_id: str,
        folder_id: Optional[str],
        query: ContentQuery,
        actor_id: str,
    ) -> ContentPage:
        room = await self.access.require_room(room_id, actor_id, Capability.READ)
        page = await self.list_content(ContentScope.room(str(room.id)), folder_id, query, actor_id)
        page.room = RoomInfo(
            id=str(room.id),
            title=room.title,
            user_role=await self.access.rooms.role_in_room(room, actor_id),
        )
        return page

    async def list_notes_content(self, actor_id: str, folder_id: Optional[str], query: ContentQuery) -> ContentPage:
        return await self.list_content(ContentScope.notes(actor_id), folder_id, query, actor_id)

    async def bulk_delete_room_content(self, room_id: str, request: BulkDeleteRequest, actor_id: str) -> BulkDeleteResult:
        """Best-effort delete of files and folders (with their contents) in one room.

        Files go first so a file listed explicitly and also inside a listed
        folder is only counted once.
        """
        room = await self.access.require_room(room_id, actor_id, Capability.DELETE)
        room_id = str(room.id)
        scope = ContentScope.room(room_id)

        counts = FolderDeletionCounts(items={adapter.kind: 0 for adapter in self.folders.adapters})
        failures: List[DeletionFailure] = []
        deleted_folders = 0

        for file_id in dict.fromkeys(request.file_ids):
            file = await self.files.get_by_id(file_id)
            if not file or file.room_id != room_id:
                failures.append(DeletionFailure(kind=self.file_items.kind, id=file_id, error="File not found in this room"))
                continue
            try:
                await self.file_items.delete_by_id(file_id, actor_id)
                counts.items[self.file_items.kind] = counts.items.get(self.file_items.kind, 0) + 1
            except Exception as e:
                logger.error(f"[BULK_DELETE] File delete failed - file_id: {file_id}, error: {str(e)}")
                failures.append(DeletionFailure(kind=self.file_items.kind, id=file_id, error=str(e)))

        for folder_id in dict.fromkeys(request.folder_ids):
            folder = await self.folders.crud.get_by_id(folder_id)
            if not folder or not scope.contains(folder):
                failures.append(DeletionFailure(kind="folder", id=folder_id, error="Folder not found in this room"))
                continue
            try:
                result = await self.folders.remove_folder(folder, actor_id)
            except InternalInconsistencyError:
                raise
            except Exception as e:
                logger.error(f"[BULK_DELETE] Folder delete failed - folder_id: {folder_id}, error: {str(e)}")
                failures.append(DeletionFailure(kind="folder", id=folder_id, error=str(e)))
                continue
            deleted_folders += 1
            counts.merge(result.counts)
            failures.extend(result.failures)

        total = deleted_folders + counts.total
        log_with_context(
            logger, "warning" if failures else "info", "[BULK_DELETE] Completed",
            room_id=room_id, actor=actor_id, folders=deleted_folders, items=counts.items, failures=len(failures),
        )
        return BulkDeleteResult(
            deleted_folders=deleted_folders,
            counts=counts,
            total=total,
            failures=failures,
            message=f"Deleted {total} item(s)" + (f", {len(failures)} failed" if failures else ""),
        )


content_service = ContentService()
