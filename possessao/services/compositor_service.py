"""
Photo compositing service
Blends a user photo with the overlay of the chosen entity
"""
import asyncio
import os
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Callable, List, Optional, Union

from PIL import Image

from possessao.core.image_effects import alpha_over, blend_overlay, horror_tone, to_array, to_image
from possessao.core.overlay_loader import OverlayLoader
from possessao.core.silhouette import DEFAULT_PARAMS, SilhouetteParams, extract_subject
from possessao.infrastructure.storage import StorageService, get_storage_service
from possessao.services.background_removal import BackgroundRemovalClient, get_background_removal_client
from possessao.utils.config import settings
from possessao.utils.logger import get_logger
from possessao.utils.exceptions import InvalidImageError

logger = get_logger(__name__)

PhotoInput = Union[str, Path, bytes]
SubjectStrategy = Callable[[Image.Image], Optional[Image.Image]]

FILE_URI_PREFIX = "file://"


def decode_photo(photo: PhotoInput) -> Image.Image:
    """
    Decode a photo reference into an RGBA image

    Args:
        photo: File path, file:// URI or encoded image bytes

    Returns:
        Decoded RGBA image

    Raises:
        InvalidImageError: If the reference cannot be read or decoded
    """
    try:
        if isinstance(photo, bytes):
            source = BytesIO(photo)
        else:
            reference = str(photo)
            if reference.startswith(FILE_URI_PREFIX):
                reference = reference[len(FILE_URI_PREFIX):]
            source = reference

        with Image.open(source) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise InvalidImageError(f"Failed to decode photo: {e}")


class ImageCompositor:
    """
    Compositing pipeline
    overlay lookup -> darken + edge-blurred overlay -> subject cut-out on top,
    or the horror tone when no overlay asset exists
    """

    def __init__(
        self,
        overlay_loader: Optional[OverlayLoader] = None,
        background_remover: Optional[BackgroundRemovalClient] = None,
        storage: Optional[StorageService] = None,
        jpeg_quality: Optional[int] = None,
        temp_dir: Optional[str] = None,
        silhouette_params: SilhouetteParams = DEFAULT_PARAMS
    ):
        """
        Initialize compositor

        Args:
            overlay_loader: Overlay lookup (uses configured overlay dir if None)
            background_remover: Remote client (uses global client if None)
            storage: Result store (uses global storage if None)
            jpeg_quality: Output JPEG quality (uses config if None)
            temp_dir: Directory for temporary uploads (uses config if None)
            silhouette_params: Local extractor constants
        """
        self.overlay_loader = overlay_loader or OverlayLoader()
        self.background_remover = background_remover or get_background_removal_client()
        self.storage = storage or get_storage_service()
        self.jpeg_quality = jpeg_quality or settings.JPEG_QUALITY
        self.temp_dir = temp_dir or settings.TEMP_DIR
        self.silhouette_params = silhouette_params

        # First non-empty result wins
        self.subject_strategies: List[SubjectStrategy] = [
            self._remote_subject,
            self._local_subject,
        ]

        logger.info("ImageCompositor initialized")

    def _remote_subject(self, photo: Image.Image) -> Optional[Image.Image]:
        """Remote background removal through a temporary JPEG"""
        if not self.background_remover.is_available:
            return None

        fd, temp_path = tempfile.mkstemp(suffix=".jpg", prefix="removebg_", dir=self.temp_dir)
        try:
            with os.fdopen(fd, "wb") as f:
                photo.convert("RGB").save(f, format="JPEG", quality=settings.REMOTE_JPEG_QUALITY)

            result = self.background_remover.remove_background(temp_path)
            if result is None:
                return None

            if result.size != photo.size:
                logger.info(f"Resizing remote result {result.size} -> {photo.size}")
                result = result.resize(photo.size, Image.BILINEAR)
            return result.convert("RGBA")
        finally:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass

    def _local_subject(self, photo: Image.Image) -> Optional[Image.Image]:
        return extract_subject(photo, self.silhouette_params)

    def extract_subject(self, photo: Image.Image) -> Optional[Image.Image]:
        """Run the subject strategies in order; a failing strategy falls through"""
        for strategy in self.subject_strategies:
            name = getattr(strategy, "__name__", repr(strategy))
            try:
                subject = strategy(photo)
            except Exception as e:
                logger.warning(f"Subject strategy {name} failed: {e}")
                continue
            if subject is not None:
                logger.info(f"Subject extracted with {name}")
                return subject
        return None

    def render(self, photo: Image.Image, entity_id: str, camera_orientation: str) -> Image.Image:
        """
        Build the composited raster without touching the result store

        Args:
            photo: Decoded user photo
            entity_id: Chosen entity
            camera_orientation: "frontal" or "traseira"

        Returns:
            RGB image of the same size as the photo
        """
        photo = photo.convert("RGBA")
        base = to_array(photo)
        overlay = self.overlay_loader.load(entity_id, camera_orientation)

        if overlay is None:
            logger.info("Applying horror tone (no overlay)")
            composed = horror_tone(base)
        else:
            composed = blend_overlay(base, overlay, camera_orientation)
            subject = self.extract_subject(photo)
            if subject is not None:
                composed = alpha_over(composed, to_array(subject))

        return to_image(composed).convert("RGB")

    def compose(self, photo: PhotoInput, entity_id: str, camera_orientation: str) -> PhotoInput:
        """
        Composite a photo with the entity overlay and store it as JPEG

        Never raises: on any failure the input reference is returned unchanged.

        Args:
            photo: File path, file:// URI or encoded image bytes
            entity_id: Chosen entity
            camera_orientation: "frontal" or "traseira"

        Returns:
            Path of the stored result, or the unchanged input on failure
        """
        try:
            image = decode_photo(photo)
        except InvalidImageError as e:
            logger.warning(f"Passthrough, photo not decodable: {e.message}")
            return photo

        try:
            result = self.render(image, entity_id, camera_orientation)

            buffer = BytesIO()
            result.save(buffer, format="JPEG", quality=self.jpeg_quality)
            output = self.storage.save_result(buffer.getvalue())

            logger.info(
                f"Composition saved: {output} "
                f"({result.size[0]}x{result.size[1]}, {len(buffer.getvalue()) // 1024}KB)"
            )
            return output
        except Exception as e:
            logger.error(f"Composition failed, returning original photo: {e}", exc_info=True)
            return photo

    async def compose_async(self, photo: PhotoInput, entity_id: str, camera_orientation: str) -> PhotoInput:
        """
        Run compose on a worker thread

        If the awaiting task is cancelled the worker still finishes, and its
        stored output is deleted as soon as it is available.
        """
        worker = asyncio.ensure_future(
            asyncio.to_thread(self.compose, photo, entity_id, camera_orientation)
        )
        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            logger.info("Composition cancelled, discarding result")
            worker.add_done_callback(lambda task: self._discard(task, photo))
            raise

    def _discard(self, task: "asyncio.Future", photo: PhotoInput) -> None:
        if task.cancelled() or task.exception() is not None:
            return
        output = task.result()
        if output is not photo and isinstance(output, str):
            self.storage.delete_file(output)


# Global compositor instance
_compositor: Optional[ImageCompositor] = None


def get_compositor() -> ImageCompositor:
    """Get compositor instance (singleton)"""
    global _compositor
    if _compositor is None:
        _compositor = ImageCompositor()
    return _compositor
