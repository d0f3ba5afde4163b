"""
Project records.
"""

from projectninjas.kernel.projects.project_service import ProjectService, ProjectWithOwner

__all__ = ["ProjectService", "ProjectWithOwner"]
