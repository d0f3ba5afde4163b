"""Integration tests for the authorization gate."""

import uuid

import pytest

from projectninjas.kernel.access.ledger import AccessRequestLedger
from projectninjas.kernel.models.project import ProjectFile
from projectninjas.kernel.permissions.authorization_gate import AuthorizationGate


async def _add_file(session, project) -> ProjectFile:
    project_file = ProjectFile(
        project_id=project.id,
        file_name="wiring.pdf",
        file_path=f"{uuid.uuid4().hex}-wiring.pdf",
        file_type="Other",
    )
    session.add(project_file)
    await session.commit()
    return project_file


async def _put_request_in(session, project, owner, requester, status):
    if status is None:
        return
    ledger = AccessRequestLedger(session)
    access_request = await ledger.submit(requester.id, project.id)
    if status != "pending":
        await ledger.respond(owner.id, access_request.id, status)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, expected",
    [(None, False), ("pending", False), ("approved", True), ("denied", False)],
)
async def test_requester_entitled_only_when_approved(
    db_session, project, owner, requester, status, expected
):
    project_file = await _add_file(db_session, project)
    await _put_request_in(db_session, project, owner, requester, status)
    gate = AuthorizationGate(db_session)

    assert await gate.can_list_files(project.id, requester.id) is expected
    assert await gate.can_download_file(project_file.id, requester.id) is expected


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [None, "pending", "approved", "denied"])
async def test_owner_always_entitled(db_session, project, owner, requester, status):
    project_file = await _add_file(db_session, project)
    await _put_request_in(db_session, project, owner, requester, status)
    gate = AuthorizationGate(db_session)

    assert await gate.can_list_files(project.id, owner.id) is True
    assert await gate.can_download_file(project_file.id, owner.id) is True


@pytest.mark.asyncio
async def test_unknown_ids_are_denied(db_session, owner):
    gate = AuthorizationGate(db_session)

    assert await gate.can_list_files(uuid.uuid4(), owner.id) is False
    assert await gate.can_download_file(uuid.uuid4(), owner.id) is False


@pytest.mark.asyncio
async def test_approval_applies_to_the_next_check(db_session, project, owner, requester):
    gate = AuthorizationGate(db_session)
    ledger = AccessRequestLedger(db_session)
    access_request = await ledger.submit(requester.id, project.id)

    assert await gate.can_list_files(project.id, requester.id) is False

    await ledger.respond(owner.id, access_request.id, "approved")

    assert await gate.can_list_files(project.id, requester.id) is True
