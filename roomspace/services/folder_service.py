from typing import List, Optional, Sequence, Tuple

from roomspace.configs.settings import settings
from roomspace.consts import FolderType
from roomspace.core.exceptions import AppError, ConflictError, ForbiddenError, InternalInconsistencyError, NotFoundError
from roomspace.crud.folder import FolderCRUD, folder_crud
from roomspace.models.folder import Folder
from roomspace.schemas import (
    BreadcrumbItem, ContentScope, DeletionFailure, FolderCreate, FolderDeletionCounts, FolderDeletionResult,
    FolderDetailResponse, FolderResponse, FolderUpdate
)
from roomspace.services.access import AccessEvaluator, Capability, access_evaluator
from roomspace.services.leaf_adapters import LEAF_ADAPTERS, LeafItemAdapter
from roomspace.utils import get_logger, log_with_context

logger = get_logger(__name__)


class FolderService:
    def __init__(
        self,
        crud: Optional[FolderCRUD] = None,
        access: Optional[AccessEvaluator] = None,
        adapters: Optional[Sequence[LeafItemAdapter]] = None,
    ):
        self.crud = crud or folder_crud
        self.access = access or access_evaluator
        self.adapters = list(adapters) if adapters is not None else list(LEAF_ADAPTERS)

    def _validate_name(self, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise AppError("Folder name is required", code="invalid_name", field="name")
        if len(name) > settings.FOLDER_NAME_MAX_LENGTH:
            raise AppError(
                f"Folder name cannot exceed {settings.FOLDER_NAME_MAX_LENGTH} characters",
                code="invalid_name",
                field="name",
            )
        return name

    async def _get_parent(self, parent_id: str) -> Folder:
        parent = await self.crud.get_by_id(parent_id)
        if not parent:
            raise NotFoundError("Parent folder not found")
        return parent

    async def _ensure_unique_sibling(self, scope: ContentScope, parent_id: Optional[str], name: str) -> None:
        existing = await self.crud.find_sibling(scope, parent_id, name)
        if existing:
            raise ConflictError("A folder with this name already exists at this level", field="name")

    async def _ensure_depth(self, parent: Folder) -> None:
        """Reject a new child of parent that would sit deeper than FOLDER_MAX_DEPTH"""
        if len(await self._walk_up(parent)) >= settings.FOLDER_MAX_DEPTH:
            raise ConflictError(f"Folders cannot be nested more than {settings.FOLDER_MAX_DEPTH} levels deep")

    # =========================================================================
    # Creation
    # =========================================================================
    async def create_room_folder(self, name: str, room_id: str, parent_id: Optional[str], actor_id: str) -> Folder:
        """Create a folder in a room.

        Any member may probe the tree (and so gets name conflicts reported),
        but only the room admin and moderators may actually create.
        """
        name = self._validate_name(name)
        room = await self.access.rooms.get_room(room_id)
        grant = await self.access.evaluate_room(actor_id, room)
        if not grant.can_read:
            raise ForbiddenError("You do not have access to this room")

        room_id = str(room.id)
        if parent_id:
            parent = await self._get_parent(parent_id)
            if parent.folder_type != FolderType.ROOM or parent.room_id != room_id:
                raise ConflictError("Parent folder must be in the same room")
            await self._ensure_depth(parent)

        scope = ContentScope.room(room_id)
        await self._ensure_unique_sibling(scope, parent_id, name)

        if not grant.can_write:
            raise ForbiddenError("Only room admins and moderators can create folders")

        folder = await self.crud.create(FolderCreate(
            name=name,
            folder_type=FolderType.ROOM,
            owner_id=actor_id,
            room_id=room_id,
            parent_id=parent_id,
        ))
        logger.info(f"Room folder created - id: {folder.id}, room: {room_id}, parent: {parent_id}, actor: {actor_id}")
        return folder

    async def create_notes_folder(self, name: str, parent_id: Optional[str], actor_id: str) -> Folder:
        name = self._validate_name(name)
        if parent_id:
            parent = await self._get_parent(parent_id)
            if parent.folder_type != FolderType.NOTES:
                raise ConflictError("Parent folder must be a notes folder")
            if parent.owner_id != actor_id:
                raise ForbiddenError("You can only create subfolders in your own folders")
            await self._ensure_depth(parent)

        scope = ContentScope.notes(actor_id)
        await self._ensure_unique_sibling(scope, parent_id, name)

        folder = await self.crud.create(FolderCreate(
            name=name,
            folder_type=FolderType.NOTES,
            owner_id=actor_id,
            parent_id=parent_id,
        ))
        logger.info(f"Notes folder created - id: {folder.id}, parent: {parent_id}, owner: {actor_id}")
        return folder

    # =========================================================================
    # Rename / move
    # =========================================================================
    async def rename(self, folder_id: str, new_name: str, actor_id: str) -> Folder:
        # Sibling names are only checked at creation; a rename may duplicate one
        folder = await self.access.require_folder(folder_id, actor_id, Capability.WRITE)
        name = self._validate_name(new_name)
        folder = await self.crud.update(folder, {"name": name})
        logger.info(f"Folder renamed - id: {folder_id}, name: {name}, actor: {actor_id}")
        return folder

    async def _subtree_height(self, folder: Folder) -> int:
        """Levels in the subtree rooted at folder, counted up to FOLDER_MAX_DEPTH + 1"""
        height = 1
        level = [str(folder.id)]
        seen = set(level)
        while height <= settings.FOLDER_MAX_DEPTH:
            children = await self.crud.get_children_of(level)
            level = [str(child.id) for child in children if str(child.id) not in seen]
            if not level:
                break
            seen.update(level)
            height += 1
        return height

    async def _resolve_new_parent(self, folder: Folder, new_parent_id: Optional[str]) -> Optional[str]:
        """Validate moving folder below new_parent_id; None detaches it to the scope root"""
        if not new_parent_id:
            return None

        folder_id = str(folder.id)
        if new_parent_id == folder_id:
            raise ConflictError("A folder cannot be its own parent")

        new_parent = await self._get_parent(new_parent_id)
        if new_parent.folder_type != folder.folder_type:
            raise ConflictError("Parent folder must be of the same folder type")
        if folder.folder_type == FolderType.ROOM and new_parent.room_id != folder.room_id:
            raise ConflictError("Parent folder must be in the same room")
        if folder.folder_type == FolderType.NOTES and new_parent.owner_id != folder.owner_id:
            raise ConflictError("Parent folder must belong to the same owner")

        chain = await self._walk_up(new_parent)
        if any(str(node.id) == folder_id for node in chain):
            raise ConflictError("Cannot move folder to its own descendant")
        if len(chain) + await self._subtree_height(folder) > settings.FOLDER_MAX_DEPTH:
            raise ConflictError(f"Folders cannot be nested more than {settings.FOLDER_MAX_DEPTH} levels deep")
        return str(new_parent.id)

    async def reparent(self, folder_id: str, new_parent_id: Optional[str], actor_id: str) -> Folder:
        folder = await self.access.require_folder(folder_id, actor_id, Capability.WRITE)
        new_parent_id = await self._resolve_new_parent(folder, new_parent_id)
        folder = await self.crud.update(folder, {"parent_id": new_parent_id})
        logger.info(f"Folder moved - id: {folder_id}, parent: {new_parent_id}, actor: {actor_id}")
        return folder

    async def update_folder(self, folder_id: str, update: FolderUpdate, actor_id: str) -> Folder:
        """Apply a partial update in one write; parent_id present (even null) means move.

        Both fields are validated before anything is saved.
        """
        folder = await self.access.require_folder(folder_id, actor_id, Capability.WRITE)
        changes = {}
        if update.name is not None:
            changes["name"] = self._validate_name(update.name)
        if "parent_id" in update.model_fields_set:
            changes["parent_id"] = await self._resolve_new_parent(folder, update.parent_id)
        if not changes:
            return folder

        folder = await self.crud.update(folder, changes)
        logger.info(f"Folder updated - id: {folder_id}, fields: {sorted(changes)}, actor: {actor_id}")
        return folder

    # =========================================================================
    # Ancestry
    # =========================================================================
    async def _walk_up(self, folder: Folder) -> List[Folder]:
        """Folder and its ancestors, root first, bounded by FOLDER_MAX_DEPTH"""
        chain = [folder]
        seen = {str(folder.id)}
        current = folder
        while current.parent_id:
            if len(chain) >= settings.FOLDER_MAX_DEPTH or current.parent_id in seen:
                logger.error(f"Folder ancestry is corrupted - start: {folder.id}, stuck at: {current.parent_id}, depth: {len(chain)}")
                raise InternalInconsistencyError(f"Folder ancestry of {folder.id} exceeds the maximum depth")
            parent = await self.crud.get_by_id(current.parent_id)
            if parent is None:
                logger.warning(f"Dangling parent reference - folder: {current.id}, parent: {current.parent_id}")
                break
            chain.append(parent)
            seen.add(str(parent.id))
            current = parent
        chain.reverse()
        return chain

    async def ancestry_of(self, folder: Folder) -> List[BreadcrumbItem]:
        chain = await self._walk_up(folder)
        return [BreadcrumbItem(id=str(node.id), name=node.name, folder_type=node.folder_type) for node in chain]

    async def ancestry(self, folder_id: str) -> List[BreadcrumbItem]:
        folder = await self.crud.get_by_id(folder_id)
        if not folder:
            raise NotFoundError("Folder not found")
        return await self.ancestry_of(folder)

    async def get_breadcrumb(self, folder_id: str, actor_id: str) -> List[BreadcrumbItem]:
        folder = await self.access.require_folder(folder_id, actor_id, Capability.READ)
        return await self.ancestry_of(folder)

    # =========================================================================
    # Deletion
    # =========================================================================
    async def _delete_contents(
        self,
        folder: Folder,
        actor_id: str,
        visited: set,
    ) -> Tuple[FolderDeletionCounts, List[DeletionFailure]]:
        """Post-order cascade: sub-folders (and their contents) first, then this folder's leaf items.

        The folder record itself is left for the caller to delete.
        """
        folder_id = str(folder.id)
        if folder_id in visited:
            logger.error(f"Folder tree is corrupted - revisited folder: {folder_id}")
            raise InternalInconsistencyError(f"Folder {folder_id} is reachable from its own subtree")
        visited.add(folder_id)

        counts = FolderDeletionCounts(items={adapter.kind: 0 for adapter in self.adapters})
        failures: List[DeletionFailure] = []

        for child in await self.crud.get_children(folder_id):
            child_counts, child_failures = await self._delete_contents(child, actor_id, visited)
            counts.merge(child_counts)
            failures.extend(child_failures)
            try:
                await self.crud.delete(child)
                counts.subfolders += 1
            except Exception as e:
                logger.error(f"[FOLDER_DELETE] Sub-folder delete failed - folder_id: {child.id}, error: {str(e)}", exc_info=True)
                failures.append(DeletionFailure(kind="folder", id=str(child.id), error=str(e)))

        for adapter in self.adapters:
            for item_id in await adapter.ids_in_folder(folder_id):
                try:
                    await adapter.delete_by_id(item_id, actor_id)
                    counts.items[adapter.kind] += 1
                except Exception as e:
                    logger.error(f"[FOLDER_DELETE] {adapter.kind} delete failed - id: {item_id}, folder_id: {folder_id}, error: {str(e)}")
                    failures.append(DeletionFailure(kind=adapter.kind, id=item_id, error=str(e)))

        return counts, failures

    async def remove_folder(self, folder: Folder, actor_id: str) -> FolderDeletionResult:
        """Cascade-delete an already authorized folder"""
        counts, failures = await self._delete_contents(folder, actor_id, set())
        await self.crud.delete(folder)

        log_with_context(
            logger, "warning" if failures else "info", "[FOLDER_DELETE] Completed",
            folder_id=str(folder.id), actor=actor_id, subfolders=counts.subfolders,
            items=counts.items, failures=len(failures),
        )
        return FolderDeletionResult(
            deleted_folder=FolderResponse.model_validate(folder),
            counts=counts,
            total=counts.total,
            failures=failures,
        )

    async def remove(self, folder_id: str, actor_id: str) -> FolderDeletionResult:
        folder = await self.access.require_folder(folder_id, actor_id, Capability.DELETE)
        logger.info(f"[FOLDER_DELETE] Starting deletion - folder_id: {folder_id}, actor: {actor_id}")
        return await self.remove_folder(folder, actor_id)

    # =========================================================================
    # Detail
    # =========================================================================
    async def get_folder_detail(self, folder_id: str, actor_id: str) -> FolderDetailResponse:
        folder = await self.access.require_folder(folder_id, actor_id, Capability.READ)
        folder_id = str(folder.id)

        subfolder_count = await self.crud.count({"parent_id": folder_id})
        item_counts = {}
        recent_items = {}
        for adapter in self.adapters:
            grouped = await adapter.count_by_folders([folder_id])
            item_counts[adapter.kind] = grouped.get(folder_id, 0)
            recent = await adapter.recent_in_folder(folder_id, settings.RECENT_ITEMS_LIMIT)
            recent_items[adapter.kind] = [item.model_dump(mode="json") for item in recent]

        return FolderDetailResponse(
            **FolderResponse.model_validate(folder).model_dump(),
            subfolder_count=subfolder_count,
            item_counts=item_counts,
            recent_items=recent_items,
            breadcrumb=await self.ancestry_of(folder),
        )


folder_service = FolderService()
