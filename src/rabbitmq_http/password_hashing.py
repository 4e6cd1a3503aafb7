"""Client-side password hashing for :class:`~rabbitmq_http.models.UserParams`.

RabbitMQ's default ``rabbit_password_hashing_sha256`` scheme stores
``base64(salt + sha256(salt + utf8(password)))`` with a 4-byte random salt.
Pre-hashing lets a user be created without the clear-text password ever
crossing the wire.

Example::

    params = UserParams(
        name="ops",
        password_hash=salted_password_hash("s3kr3t"),
        hashing_algorithm=SHA256_ALGORITHM,
    )
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from typing import Optional

SALT_LENGTH = 4
SHA256_ALGORITHM = "rabbit_password_hashing_sha256"
SHA512_ALGORITHM = "rabbit_password_hashing_sha512"

_DIGESTS = {
    SHA256_ALGORITHM: hashlib.sha256,
    SHA512_ALGORITHM: hashlib.sha512,
}


def new_salt() -> bytes:
    return secrets.token_bytes(SALT_LENGTH)


def salted_password_hash(
    password: str,
    salt: Optional[bytes] = None,
    algorithm: str = SHA256_ALGORITHM,
) -> str:
    """Hash *password* the way the broker does for *algorithm*.

    Args:
        password: Clear-text password.
        salt: Exactly :data:`SALT_LENGTH` bytes; random when omitted.
        algorithm: ``rabbit_password_hashing_sha256`` or ``..._sha512``.

    Raises:
        ValueError: For a salt of the wrong length or an unknown algorithm.
    """
    if salt is None:
        salt = new_salt()
    if len(salt) != SALT_LENGTH:
        raise ValueError(f"salt must be {SALT_LENGTH} bytes, got {len(salt)}")
    try:
        digest = _DIGESTS[algorithm]
    except KeyError:
        raise ValueError(f"unsupported hashing algorithm: {algorithm}") from None
    hashed = digest(salt + password.encode("utf-8")).digest()
    return base64.b64encode(salt + hashed).decode("ascii")


def verify_password_hash(password: str, password_hash: str, algorithm: str = SHA256_ALGORITHM) -> bool:
    """Check *password* against a hash produced by :func:`salted_password_hash`."""
    raw = base64.b64decode(password_hash)
    expected = salted_password_hash(password, raw[:SALT_LENGTH], algorithm)
    return secrets.compare_digest(expected, password_hash)
