"""
API routes.
"""

from fastapi import APIRouter

from projectninjas.api.routes import access_requests, auth, files, projects

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
# File routes first so /projects/files/... never reaches /projects/{project_id}
router.include_router(files.router, prefix="/projects", tags=["Files"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(access_requests.router, prefix="/requests", tags=["Access Requests"])
