"""Password hash schemes selectable from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

_ADAPTIVE_NAMES = frozenset({"blowfish (bcrypt)", "bcrypt", "blowfish"})


class DigestAlgorithm(StrEnum):
    """Fixed digest algorithms accepted for unsalted password hashes."""

    MD5 = "MD5"
    SHA1 = "SHA-1"
    SHA224 = "SHA-224"
    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"
    SHA3_224 = "SHA3-224"
    SHA3_256 = "SHA3-256"
    SHA3_384 = "SHA3-384"
    SHA3_512 = "SHA3-512"

    @property
    def hashlib_name(self) -> str:
        """Return the algorithm name understood by ``hashlib.new``."""

        return _HASHLIB_NAMES[self]


_HASHLIB_NAMES = {
    DigestAlgorithm.MD5: "md5",
    DigestAlgorithm.SHA1: "sha1",
    DigestAlgorithm.SHA224: "sha224",
    DigestAlgorithm.SHA256: "sha256",
    DigestAlgorithm.SHA384: "sha384",
    DigestAlgorithm.SHA512: "sha512",
    DigestAlgorithm.SHA3_224: "sha3_224",
    DigestAlgorithm.SHA3_256: "sha3_256",
    DigestAlgorithm.SHA3_384: "sha3_384",
    DigestAlgorithm.SHA3_512: "sha3_512",
}


@dataclass(frozen=True)
class AdaptiveSaltedScheme:
    """bcrypt-family hashes carrying their own salt and cost factor."""


@dataclass(frozen=True)
class DigestScheme:
    """Hex-encoded digest of the UTF-8 password bytes."""

    algorithm: DigestAlgorithm


HashScheme = AdaptiveSaltedScheme | DigestScheme


def _compact(name: str) -> str:
    return name.strip().upper().replace("-", "").replace("_", "")


def parse_hash_scheme(name: str) -> HashScheme:
    """Resolve one configured hash-function name into a hash scheme."""

    if name.strip().lower() in _ADAPTIVE_NAMES:
        return AdaptiveSaltedScheme()

    compact = _compact(name)
    for algorithm in DigestAlgorithm:
        if _compact(algorithm.value) == compact:
            return DigestScheme(algorithm=algorithm)
    raise ValueError(f"unsupported hash function: {name!r}")
