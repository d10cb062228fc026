import pytest

from roomspace.consts import FileCategory
from roomspace.configs.settings import settings
from roomspace.core.exceptions import AppError, ConflictError, ForbiddenError, NotFoundError
from roomspace.models import File, Note
from roomspace.schemas import FileCreate, NoteCreate, NoteUpdate
from roomspace.services.file_service import file_service
from roomspace.services.note_service import note_service
from roomspace.utils.dispatcher import dispatcher
from tests.conftest import ADMIN, MEMBER, MODERATOR, OUTSIDER


# =============================================================================
# Notes
# =============================================================================
async def test_create_note_in_own_folder(make_notes_folder):
    folder = await make_notes_folder("Drafts", owner_id="alice")

    note = await note_service.create_note(NoteCreate(title="Limits", content="lim x->0", folder_id=str(folder.id)), "alice")

    assert note.owner_id == "alice"
    assert note.folder_id == str(folder.id)


async def test_note_target_must_be_own_notes_folder(room, make_notes_folder, make_room_folder):
    foreign = await make_notes_folder("Bob's", owner_id="bob")
    room_folder = await make_room_folder("Lectures")

    for folder in (foreign, room_folder):
        with pytest.raises(ForbiddenError):
            await note_service.create_note(NoteCreate(content="x", folder_id=str(folder.id)), "alice")
    with pytest.raises(NotFoundError):
        await note_service.create_note(NoteCreate(content="x", folder_id="507f1f77bcf86cd799439011"), "alice")


async def test_update_move_and_delete_note(make_notes_folder, make_note):
    folder = await make_notes_folder("Drafts", owner_id="alice")
    note = await make_note("Old", "alice")

    updated = await note_service.update_note(str(note.id), NoteUpdate(title="New"), "alice")
    assert updated.title == "New"
    assert updated.content == note.content

    moved = await note_service.move_note(str(note.id), str(folder.id), "alice")
    assert moved.folder_id == str(folder.id)
    unfiled = await note_service.move_note(str(note.id), None, "alice")
    assert unfiled.folder_id is None

    with pytest.raises(ForbiddenError):
        await note_service.delete_note(str(note.id), "bob")
    await note_service.delete_note(str(note.id), "alice")
    assert await Note.get(note.id) is None


# =============================================================================
# Files
# =============================================================================
def upload(name="slides.pptx", mime_type="application/vnd.openxmlformats-officedocument.presentationml.presentation", **kwargs):
    return FileCreate(
        original_name=name,
        file_name=f"stored-{name}",
        file_path=f"uploads/{name}",
        mime_type=mime_type,
        size=2048,
        **kwargs,
    )


async def test_register_room_file_queues_processing(room, make_room_folder, task_client):
    folder = await make_room_folder("Lectures")

    file = await file_service.register_file(upload(room_id=str(room.id), folder_id=str(folder.id)), MEMBER)
    await dispatcher.drain()

    assert file.uploader_id == MEMBER
    assert file.room_id == str(room.id)
    assert file.folder_id == str(folder.id)
    assert file.file_category == FileCategory.PRESENTATION
    task_client.create_file_embedding_task.assert_called_once_with(
        file_id=str(file.id),
        uploader_id=MEMBER,
        file_path=file.file_path,
        mime_type=file.mime_type,
        room_id=str(room.id),
    )


async def test_register_skips_processing_when_disabled(monkeypatch, task_client):
    monkeypatch.setattr(settings, "FILE_PROCESSING_ENABLED", False)

    await file_service.register_file(upload("notes.txt", "text/plain"), "alice")
    await dispatcher.drain()

    task_client.create_file_embedding_task.assert_not_called()


async def test_register_room_file_requires_membership(room):
    with pytest.raises(ForbiddenError):
        await file_service.register_file(upload(room_id=str(room.id)), OUTSIDER)


async def test_register_rejects_folder_from_other_scope(room, make_room_folder, make_notes_folder):
    room_folder = await make_room_folder("Lectures")
    notes_folder = await make_notes_folder("Drafts", owner_id=ADMIN)

    with pytest.raises(ConflictError):
        await file_service.register_file(upload(room_id=str(room.id), folder_id=str(notes_folder.id)), ADMIN)
    with pytest.raises(ConflictError):
        await file_service.register_file(upload(folder_id=str(room_folder.id)), ADMIN)


@pytest.mark.parametrize(
    "mime_type, category",
    [
        ("image/png", FileCategory.IMAGE),
        ("application/pdf", FileCategory.PDF),
        ("text/csv", FileCategory.SPREADSHEET),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", FileCategory.DOCUMENT),
        ("application/zip", FileCategory.OTHER),
    ],
)
async def test_register_derives_category(mime_type, category):
    file = await file_service.register_file(upload("upload.bin", mime_type), "alice")
    assert file.file_category == category


async def test_move_and_rename_room_file(room, make_room_folder, make_file):
    folder = await make_room_folder("Lectures")
    file = await make_file("intro.pdf", uploader_id=MEMBER)

    moved = await file_service.move_file(str(file.id), str(folder.id), MODERATOR)
    assert moved.folder_id == str(folder.id)

    renamed = await file_service.rename_file(str(file.id), "  Intro.pdf ", MEMBER)
    assert renamed.original_name == "Intro.pdf"

    with pytest.raises(AppError):
        await file_service.rename_file(str(file.id), "   ", MEMBER)


async def test_file_management_permissions(room, make_file):
    file = await make_file("intro.pdf", uploader_id=MODERATOR)

    with pytest.raises(ForbiddenError):
        await file_service.delete_file(str(file.id), MEMBER)
    with pytest.raises(NotFoundError):
        await file_service.delete_file(str(file.id), OUTSIDER)

    await file_service.delete_file(str(file.id), ADMIN)
    assert await File.get(file.id) is None


async def test_personal_file_is_private(make_file):
    file = await make_file("diary.pdf", uploader_id="alice", room_id=None)

    assert (await file_service.get_file(str(file.id), "alice")).id == file.id
    with pytest.raises(ForbiddenError):
        await file_service.get_file(str(file.id), "bob")
    with pytest.raises(ForbiddenError):
        await file_service.delete_file(str(file.id), "bob")
