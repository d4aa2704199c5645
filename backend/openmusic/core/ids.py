"""
OpenMusic API — Resource Identifiers
=====================================

What:  Generates opaque, stable identifiers of the form `<prefix>-<16 chars>`.
How:   Random UUID4 hex, truncated; the prefix names the resource type so an
       id is self-describing in logs (song-…, album-…, playlist-…).
"""

import uuid

ID_LENGTH = 16


def generate_id(prefix: str) -> str:
    """Return a new identifier such as `song-3f2a9c0d1e4b5a67`."""
    return f"{prefix}-{uuid.uuid4().hex[:ID_LENGTH]}"
