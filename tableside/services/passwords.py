"""Staff credential hashing.

bcrypt through passlib when the backend is usable, otherwise a self-describing
``pbkdf2$<iterations>$<salt hex>$<digest hex>`` string. Both formats verify.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import os
from typing import NamedTuple, Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

PBKDF2_PREFIX = "pbkdf2$"
PBKDF2_ITERATIONS = 120_000
PBKDF2_SALT_BYTES = 16
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class Pbkdf2Hash(NamedTuple):
    iterations: int
    salt: bytes
    digest: bytes

    @classmethod
    def derive(cls, password: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> "Pbkdf2Hash":
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
        return cls(iterations, salt, digest)

    @classmethod
    def parse(cls, encoded: str) -> Optional["Pbkdf2Hash"]:
        parts = encoded[len(PBKDF2_PREFIX):].split("$")
        if len(parts) != 3:
            return None
        try:
            return cls(int(parts[0]), bytes.fromhex(parts[1]), bytes.fromhex(parts[2]))
        except ValueError:
            return None

    def encode(self) -> str:
        return f"{PBKDF2_PREFIX}{self.iterations}${self.salt.hex()}${self.digest.hex()}"


def _bcrypt_context() -> Optional[CryptContext]:
    try:
        return CryptContext(schemes=["bcrypt"], deprecated="auto")
    except Exception:
        logger.warning("bcrypt unavailable, staff passwords use pbkdf2")
        return None


_pwd_context = _bcrypt_context()


def is_password_hash(value: str) -> bool:
    return value.startswith((PBKDF2_PREFIX,) + BCRYPT_PREFIXES)


def hash_password(password: str) -> str:
    if _pwd_context is not None:
        try:
            return _pwd_context.hash(password)
        except Exception:
            # bcrypt backend present but unusable at runtime
            logger.warning("bcrypt hashing failed, falling back to pbkdf2")
    return Pbkdf2Hash.derive(password, os.urandom(PBKDF2_SALT_BYTES)).encode()


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False

    if password_hash.startswith(PBKDF2_PREFIX):
        stored = Pbkdf2Hash.parse(password_hash)
        if stored is None:
            return False
        candidate = Pbkdf2Hash.derive(password, stored.salt, stored.iterations)
        return hmac.compare_digest(candidate.digest, stored.digest)

    if _pwd_context is None or not password_hash.startswith(BCRYPT_PREFIXES):
        return False
    try:
        return _pwd_context.verify(password, password_hash)
    except Exception:
        return False


def staff_password_hash(secret: str) -> str:
    """Hash a configured staff password; values that already are hashes pass through.

    Lets ``ADMIN_PASSWORD`` and the bootstrap script take either a plain
    password or a hash generated elsewhere.
    """
    if is_password_hash(secret):
        logger.info("staff password already hashed; storing as-is")
        return secret
    return hash_password(secret)
