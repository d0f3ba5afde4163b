"""
File ingestion pipeline.

An upload moves through validate -> receive -> transform -> persist ->
record. Until the project_files row is committed, every artifact the
pipeline wrote is removed again on the way out, including on cancellation.
"""

import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    StorageError,
)
from projectninjas.kernel.events.event_store import EventStore
from projectninjas.kernel.files.media import MediaKind, detect_media_kind
from projectninjas.kernel.files.storage import ContentStore, base_name, generate_artifact_name
from projectninjas.kernel.files.watermark import image_to_pdf, stamp_pdf
from projectninjas.kernel.models.event_log import EventType
from projectninjas.kernel.models.project import (
    DEFAULT_FILE_TYPE,
    DOCUMENTATION_FILE_TYPE,
    Project,
    ProjectFile,
)
from projectninjas.logging_config import get_logger

logger = get_logger(__name__)

PDF_EXTENSION = ".pdf"


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file as handed over by the HTTP layer."""

    filename: Optional[str]
    content_type: Optional[str]
    stream: BinaryIO


@dataclass(frozen=True)
class TransformedArtifact:
    """
    Output of the transform step.

    data is None when the received bytes are kept as they are.
    """

    kind: MediaKind
    data: Optional[bytes]
    file_type: str
    extension: str


def display_name_for(original_name: Optional[str], extension: str) -> str:
    """The original base name with its extension replaced by the final one."""
    stem = PurePosixPath(base_name(original_name)).stem
    return f"{stem}{extension}"


def transform_artifact(
    temp_path: Path,
    original_name: Optional[str],
    file_type: str,
) -> TransformedArtifact:
    """
    Convert and stamp a received artifact. Blocking; run it in a thread.

    Images become a stamped one-page PDF tagged "Documentation". PDFs are
    stamped and keep their tag. Anything else passes through untouched.
    """
    kind = detect_media_kind(temp_path)
    original_extension = PurePosixPath(base_name(original_name)).suffix

    if kind is MediaKind.IMAGE:
        data = stamp_pdf(image_to_pdf(temp_path.read_bytes()))
        return TransformedArtifact(
            kind=kind,
            data=data,
            file_type=DOCUMENTATION_FILE_TYPE,
            extension=PDF_EXTENSION,
        )

    if kind is MediaKind.PDF:
        return TransformedArtifact(
            kind=kind,
            data=stamp_pdf(temp_path.read_bytes()),
            file_type=file_type,
            extension=PDF_EXTENSION,
        )

    return TransformedArtifact(
        kind=kind,
        data=None,
        file_type=file_type,
        extension=original_extension,
    )


class FileIngestionPipeline:
    """Runs an owner's upload through to a committed project_files row."""

    def __init__(self, session: AsyncSession, store: ContentStore):
        self.session = session
        self.store = store
        self.event_store = EventStore(session)

    async def upload(
        self,
        project_id: uuid.UUID,
        owner_id: uuid.UUID,
        incoming: Optional[IncomingFile],
        file_type: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> ProjectFile:
        """
        Ingest one file into a project.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the caller does not own the project
            BadRequestError: If no file was sent, or a PDF or image could not
                be read
            StorageError: If the content directory could not be written
        """
        await self._validate(project_id, owner_id, incoming)
        tag = (file_type or "").strip() or DEFAULT_FILE_TYPE

        temp_path = await self.store.receive(incoming.stream)
        stored_name: Optional[str] = None
        persisted = False
        committed = False
        try:
            artifact = await asyncio.to_thread(
                transform_artifact, temp_path, incoming.filename, tag
            )
            logger.debug(
                "Upload transformed",
                extra={
                    "media_kind": artifact.kind.value,
                    "declared_content_type": incoming.content_type,
                },
            )

            file_name = display_name_for(incoming.filename, artifact.extension)
            stored_name = generate_artifact_name(file_name)
            await asyncio.to_thread(self._persist, temp_path, stored_name, artifact)
            persisted = True

            project_file = ProjectFile(
                project_id=project_id,
                file_name=file_name,
                file_path=stored_name,
                file_type=artifact.file_type,
            )
            self.session.add(project_file)
            await self.session.flush()

            await self.event_store.log(
                event_type=EventType.FILE_UPLOADED,
                entity_type="project_file",
                entity_id=project_file.id,
                user_id=owner_id,
                payload={
                    "project_id": project_id,
                    "file_name": file_name,
                    "file_type": artifact.file_type,
                    "media_kind": artifact.kind,
                },
                ip_address=ip_address,
            )
            await self.session.commit()
            committed = True
        finally:
            self.store.discard(temp_path)
            if persisted and not committed:
                self.store.discard(self.store.resolve(stored_name))

        logger.info(
            "File uploaded",
            extra={"file_id": str(project_file.id), "project_id": str(project_id)},
        )
        return project_file

    async def _validate(
        self,
        project_id: uuid.UUID,
        owner_id: uuid.UUID,
        incoming: Optional[IncomingFile],
    ) -> None:
        result = await self.session.execute(
            select(Project.owner_id).where(Project.id == project_id)
        )
        project_owner_id = result.scalar_one_or_none()
        if project_owner_id is None:
            raise NotFoundError("Project not found.")
        if project_owner_id != owner_id:
            raise ForbiddenError("Not authorized to upload files to this project.")
        if incoming is None or not incoming.filename:
            raise BadRequestError("No file uploaded.")

    def _persist(self, temp_path: Path, stored_name: str, artifact: TransformedArtifact) -> None:
        try:
            if artifact.data is None:
                self.store.adopt(temp_path, stored_name)
            else:
                self.store.write_bytes(stored_name, artifact.data)
        except OSError as e:
            raise StorageError() from e
