"""Raw refresh token values: generation, hashing and snapshot parsing.

A raw value has the shape ``<user_id>.<token_version>.<random>`` where
``<random>`` is ``secrets.token_urlsafe(48)`` (384 bits). Only the SHA-256 hex
digest of the whole value is persisted. The readable prefix lets a lookup miss
be classified: a value whose version predates the owner's live version was
removed by a global revocation rather than never issued or already rotated.
"""

from __future__ import annotations

import hashlib
import re
import secrets

RANDOM_BYTES = 48

# Ids and versions are stored in signed 64-bit columns
MAX_SNAPSHOT_INT = 2**63 - 1
_SNAPSHOT_PART = re.compile(r"[0-9]{1,19}")


def generate_refresh_token(user_id: int, token_version: int) -> str:
    return f"{int(user_id)}.{int(token_version)}.{secrets.token_urlsafe(RANDOM_BYTES)}"


def hash_refresh_token(raw: str) -> str:
    """
    Return the SHA-256 hex digest stored in place of ``raw``.

    Lone surrogates are encoded as-is, so any string hashes; such a value
    simply never matches a record.
    """
    return hashlib.sha256(raw.encode("utf-8", "surrogatepass")).hexdigest()


def parse_snapshot(raw: str) -> tuple[int, int] | None:
    """
    Extract ``(user_id, token_version)`` from a raw value.

    :returns: The pair, or ``None`` when ``raw`` does not have the expected
        shape or either number does not fit a signed 64-bit column.
    """
    parts = raw.split(".", 2)
    if len(parts) != 3 or not parts[2]:
        return None
    user_part, version_part, _ = parts
    if not (_SNAPSHOT_PART.fullmatch(user_part) and _SNAPSHOT_PART.fullmatch(version_part)):
        return None
    user_id, version = int(user_part), int(version_part)
    if user_id > MAX_SNAPSHOT_INT or version > MAX_SNAPSHOT_INT:
        return None
    return user_id, version
