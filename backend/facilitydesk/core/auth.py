"""Session context and the auth strategies behind it.

The dashboard never talks to an identity provider directly. A provider
turns a bearer token into an AuthState: who is signed in and which
profile row belongs to them. Which provider runs is decided once at
startup from configuration.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from jose import JWTError, jwt

from facilitydesk.config import AppConfig
from facilitydesk.core.errors import DataAccessError
from facilitydesk.core.realtime import ChangeEvent, ChangeHub, Subscription
from facilitydesk.schemas.entities import Role, User

if TYPE_CHECKING:
    from facilitydesk.db.repositories.base import EntityRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthState:
    is_loading: bool = False
    session: Optional[dict] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[User] = None

    @property
    def signed_in(self) -> bool:
        return self.user_id is not None

    @property
    def role(self) -> Optional[Role]:
        return self.profile.role if self.profile else None

    def to_dict(self) -> dict:
        return {
            "is_loading": self.is_loading,
            "signed_in": self.signed_in,
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role.value if self.role else None,
            "profile": self.profile.to_dict() if self.profile else None,
        }


SIGNED_OUT = AuthState()

# Development identity used when auth is bypassed
DEV_USER = User(
    id="dev-user",
    role=Role.ADMIN,
    name="Dev User",
    email="dev@test.se",
    created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
)


class AuthProvider(ABC):
    """Strategy that resolves a bearer token to the current session."""

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    @abstractmethod
    async def get_auth_state(self, token: Optional[str]) -> AuthState:
        ...


class FixtureAuthProvider(AuthProvider):
    """Always signed in as the development admin."""

    def __init__(self, user: User = DEV_USER):
        self.user = user

    async def get_auth_state(self, token: Optional[str]) -> AuthState:
        return AuthState(
            session={"user_id": self.user.id, "provider": "fixture"},
            user_id=self.user.id,
            email=self.user.email,
            profile=self.user,
        )


class BackendAuthProvider(AuthProvider):
    """Validates HS256 access tokens and attaches the stored profile.

    Profiles are cached per user id; any change to the users table drops
    the cache so a role change shows up on the next request.
    """

    def __init__(
        self,
        users: "EntityRepository[User]",
        hub: ChangeHub,
        secret: str,
        algorithm: str = "HS256",
    ):
        self.users = users
        self.hub = hub
        self.secret = secret
        self.algorithm = algorithm
        self._profiles: dict[str, Optional[User]] = {}
        self._subscription: Optional[Subscription] = None

    async def start(self) -> None:
        if self._subscription is None:
            self._subscription = self.hub.subscribe("users", self._on_users_changed)

    async def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._profiles.clear()

    async def _on_users_changed(self, event: ChangeEvent) -> None:
        self._profiles.clear()

    def decode(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None

    async def _load_profile(self, user_id: str) -> Optional[User]:
        if user_id in self._profiles:
            return self._profiles[user_id]
        try:
            profile = await self.users.get_by_id(user_id)
        except DataAccessError as e:
            # Signed in without a profile; not cached so the next call retries.
            logger.error(f"Error loading profile for {user_id}: {e}")
            return None
        self._profiles[user_id] = profile
        return profile

    async def get_auth_state(self, token: Optional[str]) -> AuthState:
        if not token:
            return SIGNED_OUT
        claims = self.decode(token)
        if not claims or not claims.get("sub"):
            return SIGNED_OUT

        user_id = str(claims["sub"])
        profile = await self._load_profile(user_id)
        return AuthState(
            session={"user_id": user_id, "exp": claims.get("exp"), "provider": "jwt"},
            user_id=user_id,
            email=claims.get("email") or (profile.email if profile else None),
            profile=profile,
        )


def build_auth_provider(
    config: AppConfig,
    users: "EntityRepository[User]",
    hub: ChangeHub,
) -> AuthProvider:
    if config.DEV_BYPASS_AUTH:
        logger.warning("Auth bypass enabled - every request runs as the dev admin")
        return FixtureAuthProvider()
    return BackendAuthProvider(users, hub, config.JWT_SECRET, config.JWT_ALGORITHM)
