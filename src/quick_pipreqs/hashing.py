"""Content hashing used to detect whether regeneration changed a file."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

import aiofiles

CHUNK_SIZE = 64 * 1024


async def file_hash(path: Path) -> Optional[str]:
    """
    Compute SHA-256 hex digest of a file's bytes.

    Args:
        path: File to hash

    Returns:
        Hex digest, or None if the file does not exist
    """
    digest = hashlib.sha256()
    try:
        async with aiofiles.open(path, "rb") as f:
            while True:
                chunk = await f.read(CHUNK_SIZE)
                if not chunk:
                    break
                digest.update(chunk)
    except FileNotFoundError:
        return None
    return digest.hexdigest()
