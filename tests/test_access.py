import pytest

from roomspace.core.exceptions import ForbiddenError, NotFoundError
from roomspace.services.access import AccessGrant, Capability, access_evaluator
from tests.conftest import ADMIN, MEMBER, MODERATOR, OUTSIDER


@pytest.mark.parametrize(
    "actor, expected",
    [
        (ADMIN, AccessGrant.full()),
        (MODERATOR, AccessGrant.full()),
        (MEMBER, AccessGrant.read_only()),
        (OUTSIDER, AccessGrant.none()),
    ],
)
async def test_room_folder_access_follows_room_role(room, make_room_folder, actor, expected):
    folder = await make_room_folder("Lectures")
    assert await access_evaluator.evaluate(actor, folder) == expected


async def test_notes_folder_access_is_ownership(make_notes_folder):
    folder = await make_notes_folder("Drafts", owner_id="alice")

    assert await access_evaluator.evaluate("alice", folder) == AccessGrant.full()
    assert await access_evaluator.evaluate("bob", folder) == AccessGrant.none()


async def test_write_and_delete_imply_read(room, make_room_folder, make_notes_folder):
    folders = [await make_room_folder("Lectures"), await make_notes_folder("Drafts", owner_id=MEMBER)]
    for folder in folders:
        for actor in (ADMIN, MODERATOR, MEMBER, OUTSIDER):
            grant = await access_evaluator.evaluate(actor, folder)
            if grant.can_write or grant.can_delete:
                assert grant.can_read


async def test_require_folder_hides_room_folders_from_outsiders(room, make_room_folder):
    folder = await make_room_folder("Lectures")

    with pytest.raises(NotFoundError):
        await access_evaluator.require_folder(str(folder.id), OUTSIDER, Capability.READ)


async def test_require_folder_rejects_member_write(room, make_room_folder):
    folder = await make_room_folder("Lectures")

    assert (await access_evaluator.require_folder(str(folder.id), MEMBER, Capability.READ)).id == folder.id
    with pytest.raises(ForbiddenError):
        await access_evaluator.require_folder(str(folder.id), MEMBER, Capability.WRITE)


async def test_require_folder_forbids_foreign_notes_folder(make_notes_folder):
    folder = await make_notes_folder("Drafts", owner_id="alice")

    with pytest.raises(ForbiddenError):
        await access_evaluator.require_folder(str(folder.id), "bob", Capability.READ)


async def test_require_folder_missing_or_malformed_id():
    with pytest.raises(NotFoundError):
        await access_evaluator.require_folder("507f1f77bcf86cd799439011", ADMIN, Capability.READ)
    with pytest.raises(NotFoundError):
        await access_evaluator.require_folder("not-an-id", ADMIN, Capability.READ)


async def test_require_room(room):
    assert (await access_evaluator.require_room(str(room.id), MEMBER, Capability.READ)).id == room.id

    with pytest.raises(ForbiddenError):
        await access_evaluator.require_room(str(room.id), OUTSIDER, Capability.READ)
    with pytest.raises(ForbiddenError):
        await access_evaluator.require_room(str(room.id), MEMBER, Capability.DELETE)
    with pytest.raises(NotFoundError):
        await access_evaluator.require_room("507f1f77bcf86cd799439011", ADMIN, Capability.READ)
