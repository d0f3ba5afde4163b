"""
Project file endpoints: upload, listing, download and deletion.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile, status
from fastapi.responses import FileResponse

from projectninjas.api.deps import CurrentUser, Files, Ingestion, get_client_ip
from projectninjas.kernel.files.ingestion import IncomingFile
from projectninjas.schemas.common import MessageResponse
from projectninjas.schemas.files import ProjectFileResponse

router = APIRouter()


@router.post(
    "/{project_id}/upload",
    response_model=ProjectFileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_project_file(
    request: Request,
    project_id: uuid.UUID,
    user: CurrentUser,
    ingestion: Ingestion,
    project_file: Optional[UploadFile] = File(None, alias="projectFile"),
    file_type: Optional[str] = Form(None, alias="fileType"),
):
    """
    Upload a file to a project (owner only).

    PDFs are stamped; images are converted to a stamped one-page PDF.
    """
    incoming = None
    if project_file is not None:
        incoming = IncomingFile(
            filename=project_file.filename,
            content_type=project_file.content_type,
            stream=project_file.file,
        )

    stored = await ingestion.upload(
        project_id,
        user.id,
        incoming,
        file_type=file_type,
        ip_address=get_client_ip(request),
    )
    return ProjectFileResponse.from_file(stored)


@router.get("/{project_id}/files", response_model=List[ProjectFileResponse])
async def list_project_files(
    project_id: uuid.UUID,
    user: CurrentUser,
    files: Files,
):
    """List a project's files (owner or approved requester)."""
    project_files = await files.list_files(project_id, user.id)
    return [ProjectFileResponse.from_file(f) for f in project_files]


@router.get("/files/{file_id}/download")
async def download_project_file(
    file_id: uuid.UUID,
    user: CurrentUser,
    files: Files,
):
    """Download a file (owner or approved requester)."""
    project_file, path = await files.open_download(file_id, user.id)
    return FileResponse(path, filename=project_file.file_name)


@router.delete("/files/{file_id}", response_model=MessageResponse)
async def delete_project_file(
    request: Request,
    file_id: uuid.UUID,
    user: CurrentUser,
    files: Files,
):
    """Delete a file (project owner only)."""
    await files.delete(file_id, user.id, ip_address=get_client_ip(request))
    return MessageResponse(message="File deleted successfully.")
