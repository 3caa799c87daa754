"""
Access Control

Stateless credential checks for reading, downloading, and deleting content.
"""

import hmac
import os
from typing import Optional

import bcrypt

from .entities import ContentRecord


# Bcrypt has a 72 byte limit
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password
        rounds: Cost factor, defaults to BCRYPT_ROUNDS env var or 10

    Returns:
        Salted bcrypt hash as text
    """
    if rounds is None:
        rounds = int(os.getenv("BCRYPT_ROUNDS", 10))
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(record: ContentRecord, supplied: Optional[str]) -> bool:
    """
    Check a supplied password against the record.

    True if the record has no password. A missing password never matches.
    """
    if not record.password_hash:
        return True
    if not supplied:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(supplied), record.password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def verify_delete_credential(
    record: ContentRecord,
    token: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> bool:
    """
    Check a delete token or owner identity against the record.

    Args:
        record: Record being deleted
        token: Delete token issued at creation
        owner_id: Authenticated owner identity

    Returns:
        True if either credential matches
    """
    if token and record.delete_token:
        if hmac.compare_digest(token.encode("utf-8"), record.delete_token.encode("utf-8")):
            return True
    if owner_id and record.owner_id:
        return str(owner_id) == str(record.owner_id)
    return False
