import pytest
from unittest.mock import MagicMock
from mongomock_motor import AsyncMongoMockClient

from roomspace.consts import FolderType, RoomMemberRole
from roomspace.databases import mongodb
from roomspace.models import DOCUMENT_MODELS, File, Folder, Note, Room, RoomMember
from roomspace.utils.dispatcher import dispatcher

ADMIN = "user-admin"
MODERATOR = "user-moderator"
MEMBER = "user-member"
OUTSIDER = "user-outsider"


@pytest.fixture(autouse=True)
async def db():
    """Fresh in-memory database for every test"""
    database = await mongodb.attach(AsyncMongoMockClient(), DOCUMENT_MODELS, db_name="roomspace_test")
    yield database
    await dispatcher.drain()
    mongodb.client = None
    mongodb.database = None


@pytest.fixture(autouse=True)
def task_client():
    """Stand-in for the Celery client so nothing reaches a broker"""
    client = MagicMock()
    client.cleanup_file_index.return_value = "cleanup-task-id"
    client.create_file_embedding_task.return_value = "embedding-task-id"
    previous = dispatcher._client
    dispatcher._client = client
    yield client
    dispatcher._client = previous


@pytest.fixture
async def room():
    """Room administered by ADMIN with one moderator and one plain member"""
    room = Room(title="Physics 101", admin_id=ADMIN)
    await room.insert()
    await RoomMember(room_id=str(room.id), user_id=MODERATOR, role=RoomMemberRole.MODERATOR).insert()
    await RoomMember(room_id=str(room.id), user_id=MEMBER, role=RoomMemberRole.MEMBER).insert()
    return room


@pytest.fixture
def make_room_folder(room):
    async def _make(name, parent=None, owner_id=ADMIN, room_id=None):
        folder = Folder(
            name=name,
            folder_type=FolderType.ROOM,
            owner_id=owner_id,
            room_id=room_id or str(room.id),
            parent_id=str(parent.id) if parent else None,
        )
        await folder.insert()
        return folder
    return _make


@pytest.fixture
def make_notes_folder():
    async def _make(name, owner_id, parent=None):
        folder = Folder(
            name=name,
            folder_type=FolderType.NOTES,
            owner_id=owner_id,
            parent_id=str(parent.id) if parent else None,
        )
        await folder.insert()
        return folder
    return _make


@pytest.fixture
def make_file(room):
    async def _make(name, folder=None, uploader_id=ADMIN, room_id="__room__", mime_type="application/pdf"):
        file = File(
            original_name=name,
            file_name=f"stored-{name}",
            file_path=f"room-files/{name}",
            mime_type=mime_type,
            size=1024,
            uploader_id=uploader_id,
            room_id=str(room.id) if room_id == "__room__" else room_id,
            folder_id=str(folder.id) if folder else None,
        )
        await file.insert()
        return file
    return _make


@pytest.fixture
def make_note():
    async def _make(title, owner_id, folder=None, content="..."):
        note = Note(owner_id=owner_id, title=title, content=content, folder_id=str(folder.id) if folder else None)
        await note.insert()
        return note
    return _make
