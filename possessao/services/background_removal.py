"""
Remote background removal (remove.bg)

Failures never propagate: every error path yields None so the compositor
can fall through to the local silhouette extractor.
"""
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import httpx
from PIL import Image

from possessao.utils.config import settings
from possessao.utils.logger import get_logger
from possessao.utils.exceptions import RemoteUnavailableError

logger = get_logger(__name__)


class BackgroundRemovalClient:
    """Client for a remove.bg compatible endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[httpx.Timeout] = None,
        enabled: Optional[bool] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize client

        Args:
            api_key: API key sent as X-Api-Key (uses config if None)
            url: Endpoint URL (uses config if None)
            timeout: httpx timeout (60s read/write, 30s connect by default)
            enabled: Master switch (uses config if None)
            transport: Custom httpx transport
        """
        self.api_key = api_key if api_key is not None else settings.REMOVE_BG_API_KEY
        self.url = url or settings.REMOVE_BG_URL
        self.timeout = timeout or httpx.Timeout(
            settings.REMOVE_BG_TIMEOUT,
            connect=settings.REMOVE_BG_CONNECT_TIMEOUT
        )
        self.enabled = settings.REMOVE_BG_ENABLED if enabled is None else enabled
        self.transport = transport

    @property
    def is_available(self) -> bool:
        return self.enabled and bool(self.api_key)

    def _request(self, image_path: Path) -> bytes:
        """POST the image and return the raw response body"""
        try:
            with open(image_path, "rb") as f, httpx.Client(
                timeout=self.timeout,
                transport=self.transport
            ) as client:
                response = client.post(
                    self.url,
                    headers={"X-Api-Key": self.api_key},
                    data={"size": settings.REMOVE_BG_SIZE},
                    files={"image_file": (image_path.name, f, "image/jpeg")},
                )
        except (httpx.HTTPError, OSError) as e:
            raise RemoteUnavailableError(f"Request failed: {e}")

        if not response.is_success:
            raise RemoteUnavailableError(
                f"HTTP {response.status_code}",
                details={"body": response.text[:200]}
            )
        if not response.content:
            raise RemoteUnavailableError("Empty response body")
        return response.content

    def remove_background(self, image_path: Union[str, Path]) -> Optional[Image.Image]:
        """
        Cut the subject out of a photo on disk

        Args:
            image_path: Path to a JPEG/PNG file

        Returns:
            RGBA image with transparent background, or None on any failure
        """
        if not self.is_available:
            logger.info("Background removal not configured, skipping remote call")
            return None

        image_path = Path(image_path)
        try:
            logger.info(f"Requesting remote background removal: {image_path.name}")
            content = self._request(image_path)
            with Image.open(BytesIO(content)) as img:
                result = img.convert("RGBA")
            logger.info(f"Remote background removal succeeded: {result.size[0]}x{result.size[1]}")
            return result
        except RemoteUnavailableError as e:
            logger.warning(f"Remote background removal unavailable: {e.message}")
        except (OSError, ValueError) as e:
            logger.warning(f"Remote background removal returned undecodable content: {e}")
        return None


# Global client instance
_background_removal_client: Optional[BackgroundRemovalClient] = None


def get_background_removal_client() -> BackgroundRemovalClient:
    """Get background removal client instance (singleton)"""
    global _background_removal_client
    if _background_removal_client is None:
        _background_removal_client = BackgroundRemovalClient()
    return _background_removal_client
