"""Integration tests for the project service."""

import io
import threading
import uuid

import pytest
from sqlalchemy import func, select

from projectninjas.exceptions import ForbiddenError, NotFoundError
from projectninjas.kernel.access.ledger import AccessRequestLedger
from projectninjas.kernel.files.ingestion import FileIngestionPipeline, IncomingFile
from projectninjas.kernel.models.access_request import AccessRequest
from projectninjas.kernel.models.project import ProjectFile
from projectninjas.kernel.projects.project_service import ProjectService


async def _count(session, model, project_id):
    return await session.scalar(
        select(func.count(model.id)).where(model.project_id == project_id)
    )


@pytest.mark.asyncio
class TestProjectService:

    async def test_create_and_get(self, db_session, content_store, owner):
        service = ProjectService(db_session, content_store)

        created = await service.create_project(
            owner, "Solar Tracker", abstract="Two-axis tracker.", keywords=["solar", "arduino"]
        )
        fetched = await service.get_project(created.project.id)

        assert fetched.project.title == "Solar Tracker"
        assert fetched.project.keywords == ["solar", "arduino"]
        assert fetched.owner_email == owner.email

    async def test_list_newest_first(self, db_session, content_store, owner):
        service = ProjectService(db_session, content_store)
        first = await service.create_project(owner, "First")
        second = await service.create_project(owner, "Second")

        listed = await service.list_projects()

        assert [entry.project.id for entry in listed] == [second.project.id, first.project.id]

    async def test_update_only_supplied_fields(self, db_session, content_store, project, owner):
        service = ProjectService(db_session, content_store)

        updated = await service.update_project(project.id, owner, title="Renamed")

        assert updated.project.title == "Renamed"
        assert updated.project.abstract == project.abstract
        assert updated.project.keywords == ["iot", "control"]

    async def test_update_by_non_owner_forbidden(self, db_session, content_store, project, requester):
        with pytest.raises(ForbiddenError):
            await ProjectService(db_session, content_store).update_project(
                project.id, requester, title="Hijacked"
            )

    async def test_get_unknown(self, db_session, content_store):
        with pytest.raises(NotFoundError):
            await ProjectService(db_session, content_store).get_project(uuid.uuid4())


@pytest.mark.asyncio
class TestDeleteProject:

    async def test_delete_cascades_rows_and_artifacts(
        self, db_session, content_store, project, owner, requester, pdf_bytes
    ):
        pipeline = FileIngestionPipeline(db_session, content_store)
        for name in ("a.pdf", "b.pdf"):
            await pipeline.upload(
                project.id,
                owner.id,
                IncomingFile(filename=name, content_type=None, stream=io.BytesIO(pdf_bytes)),
            )
        await AccessRequestLedger(db_session).submit(requester.id, project.id)
        service = ProjectService(db_session, content_store)

        await service.delete_project(project.id, owner.id)

        assert await _count(db_session, ProjectFile, project.id) == 0
        assert await _count(db_session, AccessRequest, project.id) == 0
        assert list(content_store.root.iterdir()) == []
        with pytest.raises(NotFoundError):
            await service.get_project(project.id)

    async def test_delete_tolerates_missing_artifact(
        self, db_session, content_store, project, owner
    ):
        stored = await FileIngestionPipeline(db_session, content_store).upload(
            project.id,
            owner.id,
            IncomingFile(filename="a.csv", content_type=None, stream=io.BytesIO(b"x")),
        )
        content_store.resolve(stored.file_path).unlink()
        service = ProjectService(db_session, content_store)

        await service.delete_project(project.id, owner.id)

        with pytest.raises(NotFoundError):
            await service.get_project(project.id)

    async def test_delete_by_non_owner_forbidden(self, db_session, content_store, project, requester):
        service = ProjectService(db_session, content_store)

        with pytest.raises(ForbiddenError):
            await service.delete_project(project.id, requester.id)

        assert (await service.get_project(project.id)).project.id == project.id

    async def test_delete_unknown(self, db_session, content_store, owner):
        with pytest.raises(NotFoundError):
            await ProjectService(db_session, content_store).delete_project(uuid.uuid4(), owner.id)

    async def test_artifacts_removed_off_the_event_loop(
        self, db_session, content_store, project, owner, pdf_bytes, monkeypatch
    ):
        await FileIngestionPipeline(db_session, content_store).upload(
            project.id,
            owner.id,
            IncomingFile(filename="a.pdf", content_type=None, stream=io.BytesIO(pdf_bytes)),
        )
        remove = content_store.remove
        removal_threads = []

        def tracking_remove(stored_name):
            removal_threads.append(threading.get_ident())
            return remove(stored_name)

        monkeypatch.setattr(content_store, "remove", tracking_remove)

        await ProjectService(db_session, content_store).delete_project(project.id, owner.id)

        assert len(removal_threads) == 1
        assert removal_threads[0] != threading.get_ident()
        assert list(content_store.root.iterdir()) == []
