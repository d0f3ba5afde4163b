"""
Authentication endpoints.
"""

from fastapi import APIRouter, Request, status

from projectninjas.api.deps import CurrentUser, Identity, get_client_ip
from projectninjas.kernel.identity.identity_service import AuthResult
from projectninjas.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

router = APIRouter()


def _token_response(result: AuthResult) -> TokenResponse:
    return TokenResponse(
        token=result.token,
        expires_in=result.expires_in,
        user=UserResponse.from_user(result.user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    data: RegisterRequest,
    identity: Identity,
):
    """Register a new user account and return an access token."""
    result = await identity.register(
        email=data.email,
        password=data.password,
        ip_address=get_client_ip(request),
    )
    return _token_response(result)


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, identity: Identity):
    """Authenticate user and return an access token."""
    result = await identity.login(email=data.email, password=data.password)
    return _token_response(result)


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: CurrentUser):
    """Get current user's profile."""
    return UserResponse.from_user(user)
