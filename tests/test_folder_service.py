import pytest

from roomspace.consts import FolderType
from roomspace.core.exceptions import AppError, ConflictError, ForbiddenError, InternalInconsistencyError, NotFoundError
from roomspace.models import File, Folder, Note
from roomspace.schemas import FolderUpdate
from roomspace.services.folder_service import folder_service
from tests.conftest import ADMIN, MEMBER, MODERATOR, OUTSIDER


# =============================================================================
# Creation
# =============================================================================
async def test_moderator_creates_room_folder(room):
    folder = await folder_service.create_room_folder("  Lectures ", str(room.id), None, MODERATOR)

    assert folder.name == "Lectures"
    assert folder.folder_type == FolderType.ROOM
    assert folder.room_id == str(room.id)
    assert folder.parent_id is None
    assert folder.owner_id == MODERATOR


async def test_member_gets_conflict_for_existing_sibling_name(room):
    await folder_service.create_room_folder("Lectures", str(room.id), None, MODERATOR)

    with pytest.raises(ConflictError):
        await folder_service.create_room_folder("Lectures", str(room.id), None, MEMBER)


async def test_member_cannot_create_room_folder(room):
    with pytest.raises(ForbiddenError):
        await folder_service.create_room_folder("Homework", str(room.id), None, MEMBER)


async def test_outsider_and_missing_room(room):
    with pytest.raises(ForbiddenError):
        await folder_service.create_room_folder("Homework", str(room.id), None, OUTSIDER)
    with pytest.raises(NotFoundError):
        await folder_service.create_room_folder("Homework", "507f1f77bcf86cd799439011", None, ADMIN)


async def test_room_folder_parent_must_be_in_same_room(room, make_room_folder, make_notes_folder):
    other_room_folder = await make_room_folder("Elsewhere", room_id="507f1f77bcf86cd799439099")
    notes_folder = await make_notes_folder("Drafts", owner_id=ADMIN)

    for parent in (other_room_folder, notes_folder):
        with pytest.raises(ConflictError):
            await folder_service.create_room_folder("Week 1", str(room.id), str(parent.id), ADMIN)
    with pytest.raises(NotFoundError):
        await folder_service.create_room_folder("Week 1", str(room.id), "507f1f77bcf86cd799439011", ADMIN)


async def test_same_name_allowed_at_different_levels(room):
    lectures = await folder_service.create_room_folder("Lectures", str(room.id), None, ADMIN)
    nested = await folder_service.create_room_folder("Lectures", str(room.id), str(lectures.id), ADMIN)

    assert nested.parent_id == str(lectures.id)


@pytest.mark.parametrize("name", ["", "   ", "x" * 51])
async def test_invalid_folder_names(name):
    with pytest.raises(AppError) as exc_info:
        await folder_service.create_notes_folder(name, None, "alice")
    assert exc_info.value.code == "invalid_name"
    assert exc_info.value.status_code == 400


async def test_notes_folder_creation(make_notes_folder):
    root = await folder_service.create_notes_folder("Semester 1", None, "alice")
    child = await folder_service.create_notes_folder("Maths", str(root.id), "alice")

    assert child.folder_type == FolderType.NOTES
    assert child.owner_id == "alice"
    assert child.room_id is None

    with pytest.raises(ConflictError):
        await folder_service.create_notes_folder("Semester 1", None, "alice")
    # Same name in another user's tree is fine
    await folder_service.create_notes_folder("Semester 1", None, "bob")
    with pytest.raises(ForbiddenError):
        await folder_service.create_notes_folder("Physics", str(root.id), "bob")


# =============================================================================
# Rename / move
# =============================================================================
async def test_rename_allows_duplicate_sibling_names(room, make_room_folder):
    await make_room_folder("Lectures")
    homework = await make_room_folder("Homework")

    renamed = await folder_service.rename(str(homework.id), "Lectures", MODERATOR)

    assert renamed.name == "Lectures"
    assert await Folder.find({"name": "Lectures"}).count() == 2


async def test_rename_requires_write(room, make_room_folder):
    folder = await make_room_folder("Lectures")

    with pytest.raises(ForbiddenError):
        await folder_service.rename(str(folder.id), "Slides", MEMBER)


async def test_reparent_into_descendant_is_conflict(room, make_room_folder):
    a = await make_room_folder("A")
    b = await make_room_folder("B", parent=a)
    c = await make_room_folder("C", parent=b)

    with pytest.raises(ConflictError):
        await folder_service.reparent(str(a.id), str(c.id), ADMIN)
    with pytest.raises(ConflictError):
        await folder_service.reparent(str(a.id), str(a.id), ADMIN)

    reloaded = await Folder.get(a.id)
    assert reloaded.parent_id is None


async def test_reparent_and_detach(room, make_room_folder):
    a = await make_room_folder("A")
    b = await make_room_folder("B")

    moved = await folder_service.reparent(str(b.id), str(a.id), MODERATOR)
    assert moved.parent_id == str(a.id)
    assert [item.name for item in await folder_service.ancestry(str(b.id))] == ["A", "B"]

    detached = await folder_service.reparent(str(b.id), None, MODERATOR)
    assert detached.parent_id is None
    assert (await Folder.get(b.id)).parent_id is None


async def test_reparent_rejects_scope_mismatch(room, make_room_folder, make_notes_folder):
    folder = await make_room_folder("A")
    foreign_room_folder = await make_room_folder("B", room_id="507f1f77bcf86cd799439099")
    notes_folder = await make_notes_folder("Drafts", owner_id=ADMIN)

    for target in (foreign_room_folder, notes_folder):
        with pytest.raises(ConflictError):
            await folder_service.reparent(str(folder.id), str(target.id), ADMIN)
    with pytest.raises(NotFoundError):
        await folder_service.reparent(str(folder.id), "507f1f77bcf86cd799439011", ADMIN)


async def test_update_folder_distinguishes_null_parent_from_omitted(room, make_room_folder):
    a = await make_room_folder("A")
    b = await make_room_folder("B", parent=a)

    renamed = await folder_service.update_folder(str(b.id), FolderUpdate(name="Renamed"), ADMIN)
    assert renamed.name == "Renamed"
    assert renamed.parent_id == str(a.id)

    moved = await folder_service.update_folder(str(b.id), FolderUpdate(parent_id=None), ADMIN)
    assert moved.parent_id is None
    assert moved.name == "Renamed"


async def test_update_folder_validates_before_writing(room, make_room_folder):
    a = await make_room_folder("A")
    b = await make_room_folder("B")

    with pytest.raises(AppError):
        await folder_service.update_folder(str(b.id), FolderUpdate(parent_id=str(a.id), name="   "), MODERATOR)

    reloaded = await Folder.get(b.id)
    assert reloaded.parent_id is None
    assert reloaded.name == "B"

    with pytest.raises(ConflictError):
        await folder_service.update_folder(str(b.id), FolderUpdate(parent_id=str(b.id), name="Renamed"), MODERATOR)
    assert (await Folder.get(b.id)).name == "B"

    updated = await folder_service.update_folder(str(b.id), FolderUpdate(parent_id=str(a.id), name="Renamed"), MODERATOR)
    assert updated.parent_id == str(a.id)
    assert updated.name == "Renamed"


async def test_create_rejects_nesting_past_max_depth(room, monkeypatch):
    from roomspace.configs.settings import settings
    monkeypatch.setattr(settings, "FOLDER_MAX_DEPTH", 3)

    parent_id = None
    for name in ("A", "B", "C"):
        folder = await folder_service.create_notes_folder(name, parent_id, "alice")
        parent_id = str(folder.id)

    with pytest.raises(ConflictError):
        await folder_service.create_notes_folder("D", parent_id, "alice")
    assert [item.name for item in await folder_service.get_breadcrumb(parent_id, "alice")] == ["A", "B", "C"]

    parent_id = None
    for name in ("A", "B", "C"):
        folder = await folder_service.create_room_folder(name, str(room.id), parent_id, MODERATOR)
        parent_id = str(folder.id)

    with pytest.raises(ConflictError):
        await folder_service.create_room_folder("D", str(room.id), parent_id, MODERATOR)


async def test_reparent_rejects_subtree_past_max_depth(room, make_room_folder, monkeypatch):
    from roomspace.configs.settings import settings
    monkeypatch.setattr(settings, "FOLDER_MAX_DEPTH", 3)

    a = await make_room_folder("A")
    b = await make_room_folder("B", parent=a)
    x = await make_room_folder("X")
    await make_room_folder("Y", parent=x)

    with pytest.raises(ConflictError):
        await folder_service.reparent(str(x.id), str(b.id), ADMIN)
    assert (await Folder.get(x.id)).parent_id is None

    moved = await folder_service.reparent(str(x.id), str(a.id), ADMIN)
    assert moved.parent_id == str(a.id)


# =============================================================================
# Ancestry
# =============================================================================
async def test_ancestry_is_root_first(room, make_room_folder):
    a = await make_room_folder("A")
    b = await make_room_folder("B", parent=a)
    c = await make_room_folder("C", parent=b)

    breadcrumb = await folder_service.ancestry(str(c.id))

    assert [item.name for item in breadcrumb] == ["A", "B", "C"]
    assert breadcrumb[0].id == str(a.id)


async def test_ancestry_of_cycle_is_internal_inconsistency(room, make_room_folder):
    a = await make_room_folder("A")
    b = await make_room_folder("B", parent=a)
    # Corrupt the tree behind the service's back
    await a.set({"parent_id": str(b.id)})

    with pytest.raises(InternalInconsistencyError):
        await folder_service.ancestry(str(b.id))


async def test_ancestry_depth_is_bounded(room, make_room_folder, monkeypatch):
    from roomspace.configs.settings import settings
    monkeypatch.setattr(settings, "FOLDER_MAX_DEPTH", 3)

    parent = None
    for name in ("A", "B", "C", "D"):
        parent = await make_room_folder(name, parent=parent)

    with pytest.raises(InternalInconsistencyError):
        await folder_service.ancestry(str(parent.id))


# =============================================================================
# Deletion
# =============================================================================
async def test_recursive_delete_counts(room, make_room_folder, make_file):
    a = await make_room_folder("A")
    sub1 = await make_room_folder("Sub 1", parent=a)
    await make_room_folder("Sub 2", parent=a)
    for name in ("one.pdf", "two.pdf", "three.pdf"):
        await make_file(name, folder=a)
    await make_file("nested.pdf", folder=sub1)
    untouched = await make_file("elsewhere.pdf")

    result = await folder_service.remove(str(a.id), MODERATOR)

    assert result.counts.subfolders == 2
    assert result.counts.items == {"notes": 0, "files": 4}
    assert result.total == 6
    assert result.failures == []
    assert result.deleted_folder.id == str(a.id)
    assert await Folder.find_all().count() == 0
    remaining = await File.find_all().to_list()
    assert [file.id for file in remaining] == [untouched.id]


async def test_recursive_delete_queues_index_cleanup(room, make_room_folder, make_file, task_client):
    from roomspace.utils.dispatcher import dispatcher

    a = await make_room_folder("A")
    file = await make_file("one.pdf", folder=a)

    await folder_service.remove(str(a.id), ADMIN)
    await dispatcher.drain()

    task_client.cleanup_file_index.assert_called_once_with(
        file_id=str(file.id),
        uploader_id=file.uploader_id,
        room_id=file.room_id,
        file_path=file.file_path,
    )


async def test_delete_survives_broker_failures(room, make_room_folder, make_file, task_client):
    from roomspace.utils.dispatcher import dispatcher

    task_client.cleanup_file_index.side_effect = ConnectionError("broker down")
    a = await make_room_folder("A")
    await make_file("one.pdf", folder=a)
    await make_file("two.pdf", folder=a)

    result = await folder_service.remove(str(a.id), ADMIN)
    await dispatcher.drain()

    assert result.counts.items["files"] == 2
    assert result.failures == []
    assert await File.find_all().count() == 0


async def test_notes_folder_delete_counts_notes(make_notes_folder, make_note):
    root = await make_notes_folder("Semester", owner_id="alice")
    child = await make_notes_folder("Maths", owner_id="alice", parent=root)
    await make_note("Limits", "alice", folder=root)
    await make_note("Series", "alice", folder=child)
    kept = await make_note("Unfiled", "alice")

    result = await folder_service.remove(str(root.id), "alice")

    assert result.counts.subfolders == 1
    assert result.counts.items == {"notes": 2, "files": 0}
    assert [note.id for note in await Note.find_all().to_list()] == [kept.id]


async def test_non_owner_cannot_delete_notes_folder(make_notes_folder):
    folder = await make_notes_folder("Private", owner_id="alice")

    with pytest.raises(ForbiddenError):
        await folder_service.remove(str(folder.id), "bob")
    assert await Folder.get(folder.id) is not None


async def test_member_cannot_delete_room_folder(room, make_room_folder):
    folder = await make_room_folder("A")

    with pytest.raises(ForbiddenError):
        await folder_service.remove(str(folder.id), MEMBER)
    with pytest.raises(NotFoundError):
        await folder_service.remove(str(folder.id), OUTSIDER)


async def test_item_failures_are_collected_and_cascade_continues(room, make_room_folder, make_file):
    class FailingAdapter:
        kind = "files"

        def __init__(self, wrapped):
            self.wrapped = wrapped

        async def ids_in_folder(self, folder_id):
            return await self.wrapped.ids_in_folder(folder_id)

        async def delete_by_id(self, item_id, actor_id):
            if item_id == broken_id:
                raise RuntimeError("storage unavailable")
            await self.wrapped.delete_by_id(item_id, actor_id)

    from roomspace.services.folder_service import FolderService
    from roomspace.services.leaf_adapters import file_adapter

    a = await make_room_folder("A")
    broken = await make_file("broken.pdf", folder=a)
    await make_file("fine.pdf", folder=a)
    broken_id = str(broken.id)

    service = FolderService(adapters=[FailingAdapter(file_adapter)])
    result = await service.remove(str(a.id), ADMIN)

    assert result.counts.items == {"files": 1}
    assert len(result.failures) == 1
    assert result.failures[0].id == broken_id
    assert result.failures[0].kind == "files"
    assert await Folder.get(a.id) is None


# =============================================================================
# Detail
# =============================================================================
async def test_folder_detail(room, make_room_folder, make_file):
    a = await make_room_folder("A")
    b = await make_room_folder("B", parent=a)
    await make_room_folder("C", parent=b)
    for index in range(7):
        await make_file(f"file-{index}.pdf", folder=b)

    detail = await folder_service.get_folder_detail(str(b.id), MEMBER)

    assert detail.id == str(b.id)
    assert detail.subfolder_count == 1
    assert detail.item_counts == {"notes": 0, "files": 7}
    assert len(detail.recent_items["files"]) == 5
    assert detail.recent_items["notes"] == []
    assert [item.name for item in detail.breadcrumb] == ["A", "B"]
