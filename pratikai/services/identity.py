"""
Identity resolution for bearer credentials.

Two resolvers are available:
1. FirebaseIdentityResolver: verifies Firebase ID tokens against Google's
   public certificates (signature, expiry, audience, issuer)
2. LocalIdentityResolver: verifies HS256 JWTs signed with our own secret,
   for local development and tests

Both fail closed: any token that cannot be verified raises
AuthenticationRequired. There is no fallback identity.
"""

import asyncio
import logging
from dataclasses import dataclass

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from jose import JWTError, jwt

from pratikai.config import Settings
from pratikai.errors import AuthenticationRequired

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Verified identity extracted from a bearer credential."""

    uid: str
    email: str | None = None
    name: str | None = None


def _identity_from_claims(claims: dict) -> Identity:
    # Firebase puts the uid in both user_id and sub
    uid = claims.get("user_id") or claims.get("sub")
    if not uid:
        raise AuthenticationRequired("Invalid authentication token")
    return Identity(uid=str(uid), email=claims.get("email"), name=claims.get("name"))


class IdentityResolver:
    """Maps a bearer credential to a verified Identity."""

    async def resolve(self, token: str) -> Identity:
        raise NotImplementedError


class FirebaseIdentityResolver(IdentityResolver):
    """Verifies Firebase ID tokens issued for one project."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self._request = google_requests.Request()

    def _verify(self, token: str) -> dict:
        return google_id_token.verify_firebase_token(
            token,
            self._request,
            audience=self.project_id,
        )

    async def resolve(self, token: str) -> Identity:
        try:
            # Certificate fetching is blocking I/O
            claims = await asyncio.to_thread(self._verify, token)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            logger.info("Firebase token rejected: %s", e)
            raise AuthenticationRequired("Invalid authentication token") from e

        if not claims or claims.get("iss") != self.issuer:
            raise AuthenticationRequired("Invalid authentication token")
        return _identity_from_claims(claims)


class LocalIdentityResolver(IdentityResolver):
    """Verifies JWTs signed with a shared secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def resolve(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Local token rejected: %s", e)
            raise AuthenticationRequired("Invalid authentication token") from e
        return _identity_from_claims(claims)

    def issue_token(self, uid: str, *, email: str | None = None, name: str | None = None, expires_in: int = 3600) -> str:
        """Sign a token for uid (development helper)."""
        from datetime import datetime, timedelta, timezone

        payload = {
            "sub": uid,
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        if email:
            payload["email"] = email
        if name:
            payload["name"] = name
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)


def build_identity_resolver(settings: Settings) -> IdentityResolver:
    """Create the resolver selected by settings.identity_provider."""
    if settings.identity_provider == "local":
        return LocalIdentityResolver(settings.jwt_secret_key, settings.jwt_algorithm)
    return FirebaseIdentityResolver(settings.firebase_project_id)
