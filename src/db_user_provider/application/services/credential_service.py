"""Application service for credential verification."""

from __future__ import annotations

import logging

from db_user_provider.application.ports.password_hasher_port import PasswordHasherPort
from db_user_provider.application.ports.user_repository_port import UserRepositoryPort

logger = logging.getLogger(__name__)


class CredentialUpdateNotSupportedError(NotImplementedError):
    """Raised for every password update; the provider is read-only."""


class CredentialService:
    """Verify plaintext passwords against freshly read stored hashes."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    async def verify_credentials(self, *, username: str, password: str) -> bool:
        """Return whether the password matches the stored hash for username."""

        password_hash = await self._users.get_password_hash(username=username)
        if password_hash is None:
            logger.info("credentials_verification_skipped reason=missing_password_hash")
            return False
        return self._password_hasher.verify_password(
            password=password,
            password_hash=password_hash,
        )

    async def update_credentials(self, *, username: str, password: str) -> bool:
        """Reject password updates."""

        _ = (username, password)
        raise CredentialUpdateNotSupportedError("Password update not supported")
