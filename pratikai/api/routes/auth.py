"""
Authentication Routes

Endpoints:
- POST /api/auth/register - Create the user record for a verified identity
- GET /api/auth/me - Get current user profile

Auth Flow:
1. Frontend signs the user in with the identity provider (Firebase)
2. Frontend sends the provider's ID token as 'Authorization: Bearer <token>'
3. Backend verifies the token (signature, expiry, audience, issuer)
4. On first visit the frontend POSTs /api/auth/register to create the user;
   repeating it returns the existing record unchanged
"""

from fastapi import APIRouter

from pratikai.api.deps import CurrentIdentity, CurrentUser, DbSession
from pratikai.config import get_settings
from pratikai.db import store
from pratikai.errors import AuthenticationRequired
from pratikai.schemas.auth import RegisterRequest
from pratikai.schemas.user import UserRead

router = APIRouter(prefix="/api/auth", tags=["auth"])
settings = get_settings()


@router.post("/register", response_model=UserRead)
async def register(
    request: RegisterRequest,
    identity: CurrentIdentity,
    db: DbSession,
) -> UserRead:
    """
    Idempotent upsert of the caller's user record.

    The uid in the body must be the subject of the verified credential, so a
    caller can only register themselves.
    """
    if request.uid != identity.uid:
        raise AuthenticationRequired("Token does not match uid")

    email = str(request.email).lower()
    user = await store.upsert_user(
        db,
        external_id=identity.uid,
        email=email,
        name=request.name or email.split("@")[0],
        profession=request.profession,
        credits=settings.initial_credits,
        is_admin=identity.uid in settings.admin_external_ids,
    )
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Get the current authenticated user's profile."""
    return UserRead.model_validate(current_user)
