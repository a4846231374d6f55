"""
FastAPI Dependencies for Authentication and Authorization.

Key patterns:
1. get_identity: Verifies the bearer credential, returns the provider identity
2. get_current_user: Maps that identity to a registered User
3. No global clients - the generator and identity resolver are built at
   startup, stored on app.state and handed out here

Security model:
- Credentials are verified cryptographically by the configured resolver
- Session access is gated by ownership; not-owned and missing are both 404
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pratikai.db import store
from pratikai.db.models import User
from pratikai.db.session import get_db
from pratikai.errors import AdminRequired, AuthenticationRequired
from pratikai.services.conversation import ConversationService
from pratikai.services.generator import ConversationGenerator
from pratikai.services.identity import Identity, IdentityResolver


# =============================================================================
# APPLICATION SERVICES
# =============================================================================


def get_identity_resolver(request: Request) -> IdentityResolver:
    return request.app.state.identity_resolver


def get_generator(request: Request) -> ConversationGenerator:
    return request.app.state.generator


def get_conversation_service(
    generator: Annotated[ConversationGenerator, Depends(get_generator)],
) -> ConversationService:
    return ConversationService(generator)


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the credential from an 'Authorization: Bearer <token>' header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise AuthenticationRequired("No authentication token provided")


async def get_identity(
    token: Annotated[str, Depends(get_token_from_request)],
    resolver: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> Identity:
    """Verify the bearer credential. Raises 401 if it cannot be verified."""
    return await resolver.resolve(token)


async def get_current_user(
    identity: Annotated[Identity, Depends(get_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Return the registered user for the verified identity.

    Raises 401 if the identity has never registered; registration is the
    only place users are created.
    """
    user = await store.get_user_by_external_id(db, identity.uid)
    if user is None:
        raise AuthenticationRequired("User not registered")
    return user


async def get_admin_user(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Current user, who must be an admin (403 otherwise)."""
    if not user.is_admin:
        raise AdminRequired()
    return user


# Type aliases for dependency injection
CurrentIdentity = Annotated[Identity, Depends(get_identity)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_admin_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Conversations = Annotated[ConversationService, Depends(get_conversation_service)]
