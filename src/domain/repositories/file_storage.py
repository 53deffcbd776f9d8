"""File storage protocol."""

from typing import Protocol


class IFileStorage(Protocol):
    """Object storage for profile pictures."""

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store bytes at ``path`` and return their public URI."""
        ...
