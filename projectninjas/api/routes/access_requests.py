"""
Access request endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, Request, status

from projectninjas.api.deps import CurrentUser, Ledger, get_client_ip
from projectninjas.schemas.access_request import (
    AccessRequestCreate,
    AccessRequestRespond,
    AccessRequestResponse,
    ReceivedAccessRequestResponse,
    SentAccessRequestResponse,
)

router = APIRouter()


@router.post("", response_model=AccessRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_access_request(
    request: Request,
    data: AccessRequestCreate,
    user: CurrentUser,
    ledger: Ledger,
):
    """Ask a project's owner for access to its files."""
    access_request = await ledger.submit(
        user.id, data.project_id, ip_address=get_client_ip(request)
    )
    return AccessRequestResponse.from_request(access_request)


@router.get("/mine", response_model=List[ReceivedAccessRequestResponse])
async def list_received_requests(user: CurrentUser, ledger: Ledger):
    """Requests made against the caller's projects."""
    entries = await ledger.list_received(user.id)
    return [ReceivedAccessRequestResponse.from_entry(entry) for entry in entries]


@router.get("/sent", response_model=List[SentAccessRequestResponse])
async def list_sent_requests(user: CurrentUser, ledger: Ledger):
    """Requests the caller has submitted."""
    entries = await ledger.list_sent(user.id)
    return [SentAccessRequestResponse.from_entry(entry) for entry in entries]


@router.put("/{request_id}", response_model=AccessRequestResponse)
async def respond_to_request(
    request: Request,
    request_id: uuid.UUID,
    data: AccessRequestRespond,
    user: CurrentUser,
    ledger: Ledger,
):
    """Approve or deny a pending request (project owner only)."""
    access_request = await ledger.respond(
        user.id, request_id, data.status, ip_address=get_client_ip(request)
    )
    return AccessRequestResponse.from_request(access_request)
