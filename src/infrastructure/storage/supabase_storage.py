"""Supabase Storage adapter for profile pictures."""

import httpx
import structlog

from core.config import settings
from core.exceptions import UpstreamUnavailableError

logger = structlog.get_logger()


class SupabaseStorage:
    """Uploads objects through the Supabase Storage REST API."""

    def __init__(
        self,
        base_url: str = settings.supabase_url,
        service_key: str = settings.supabase_service_role_key,
        bucket: str = settings.storage_bucket,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._transport = transport
        self._timeout = timeout

    def public_url(self, path: str) -> str:
        """Public URL of an object in the bucket."""
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{path}"

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store bytes at ``path`` and return their public URI.

        Raises:
            UpstreamUnavailableError: If storage is unreachable or refuses the object.
        """
        headers = {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
            "Content-Type": content_type,
            "x-upsert": "false",
        }
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                transport=self._transport,
                timeout=self._timeout,
            ) as client:
                response = await client.post(
                    f"/storage/v1/object/{self._bucket}/{path}",
                    content=data,
                    headers=headers,
                )
        except httpx.TransportError as e:
            logger.error("storage_unreachable", path=path, error=str(e))
            raise UpstreamUnavailableError("storage") from e

        if response.is_error:
            logger.error(
                "storage_upload_failed",
                path=path,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise UpstreamUnavailableError("storage", message="Failed to upload image")

        return self.public_url(path)
