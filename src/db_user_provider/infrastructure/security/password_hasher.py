"""Password verification adapters for the supported hash schemes."""

from __future__ import annotations

import hashlib
import hmac

import bcrypt

from db_user_provider.application.ports.password_hasher_port import PasswordHasherPort
from db_user_provider.domain.hash_scheme import (
    AdaptiveSaltedScheme,
    DigestAlgorithm,
    DigestScheme,
    HashScheme,
)


class BcryptPasswordHasher(PasswordHasherPort):
    """Password verification adapter using bcrypt."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False


class DigestPasswordHasher(PasswordHasherPort):
    """Compare the hex digest of the UTF-8 password with the stored value."""

    def __init__(self, algorithm: DigestAlgorithm) -> None:
        self._algorithm = algorithm

    @property
    def algorithm(self) -> DigestAlgorithm:
        return self._algorithm

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        digest = hashlib.new(self._algorithm.hashlib_name, password.encode("utf-8"))
        expected = password_hash.strip().lower()
        return hmac.compare_digest(digest.hexdigest().encode("ascii"), expected.encode("utf-8"))


def create_password_hasher(scheme: HashScheme) -> PasswordHasherPort:
    """Return the verifier for one configured hash scheme."""

    if isinstance(scheme, AdaptiveSaltedScheme):
        return BcryptPasswordHasher()
    if isinstance(scheme, DigestScheme):
        return DigestPasswordHasher(scheme.algorithm)
    raise TypeError(f"unsupported hash scheme: {scheme!r}")
