"""
Project file schemas.
"""

import uuid
from datetime import datetime

from projectninjas.kernel.models.project import ProjectFile
from projectninjas.schemas.common import CamelModel


class ProjectFileResponse(CamelModel):
    """Stored file metadata. The artifact name on disk is not exposed."""

    file_id: uuid.UUID
    project_id: uuid.UUID
    file_name: str
    file_type: str
    uploaded_at: datetime

    @classmethod
    def from_file(cls, project_file: ProjectFile) -> "ProjectFileResponse":
        return cls(
            file_id=project_file.id,
            project_id=project_file.project_id,
            file_name=project_file.file_name,
            file_type=project_file.file_type,
            uploaded_at=project_file.uploaded_at,
        )
