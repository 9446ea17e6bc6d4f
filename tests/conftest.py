"""
Pytest configuration and shared fixtures for the Possessão tests.
"""
import struct
import zlib
from io import BytesIO
from pathlib import Path
from typing import Callable, Sequence

import numpy as np
import pytest
from PIL import Image

from possessao.core.catalog import EntityCatalog
from possessao.core.entities import EntityDefinition
from possessao.core.overlay_loader import OverlayLoader
from possessao.infrastructure.storage import LocalStorage, StorageService
from possessao.services.background_removal import BackgroundRemovalClient
from possessao.services.compositor_service import ImageCompositor


# ============================================================================
# Fixtures: Entities
# ============================================================================

@pytest.fixture
def make_entity() -> Callable[..., EntityDefinition]:
    """Factory for minimal entity definitions."""
    def _make(
        entity_id: str,
        traits: Sequence[str],
        genders: Sequence[str] = (),
        age_groups: Sequence[str] = (),
    ) -> EntityDefinition:
        return EntityDefinition(
            id=entity_id,
            name=entity_id.title(),
            culture="Teste",
            traits=tuple(traits),
            description=f"Entidade {entity_id}",
            affected_genders=frozenset(genders),
            affected_age_groups=frozenset(age_groups),
        )
    return _make


@pytest.fixture
def sample_catalog() -> EntityCatalog:
    """Catalog built from the shipped seed list."""
    return EntityCatalog.from_samples()


# ============================================================================
# Fixtures: Images
# ============================================================================

@pytest.fixture
def flat_photo() -> Image.Image:
    """Uniform mid-grey photo with no edges anywhere."""
    return Image.new("RGB", (60, 80), (120, 120, 120))


@pytest.fixture
def subject_photo() -> Image.Image:
    """Dark background with a bright block in the middle."""
    data = np.full((90, 60, 3), 20, dtype=np.uint8)
    data[30:60, 20:40] = (230, 200, 180)
    return Image.fromarray(data)


@pytest.fixture
def photo_bytes(flat_photo) -> bytes:
    buffer = BytesIO()
    flat_photo.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@pytest.fixture
def oversized_png() -> bytes:
    """PNG header declaring 20000x20000 pixels, past Pillow's decompression-bomb limit."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)

    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0))
        + chunk(b"IDAT", zlib.compress(b""))
    )


@pytest.fixture
def photo_file(tmp_path, flat_photo) -> Path:
    path = tmp_path / "photo.png"
    flat_photo.save(path, format="PNG")
    return path


@pytest.fixture
def overlay_image() -> Image.Image:
    """Semi-transparent red overlay."""
    return Image.new("RGBA", (40, 40), (200, 0, 0, 200))


# ============================================================================
# Fixtures: Services
# ============================================================================

@pytest.fixture
def empty_overlay_dir(tmp_path) -> Path:
    path = tmp_path / "overlays_empty"
    path.mkdir()
    return path


@pytest.fixture
def overlay_dir(tmp_path, overlay_image) -> Path:
    """Overlay directory containing art for legiao (frontal) only."""
    path = tmp_path / "overlays"
    path.mkdir()
    overlay_image.save(path / "legiao_frontal.png", format="PNG")
    return path


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "processed"


@pytest.fixture
def storage(output_dir) -> StorageService:
    return StorageService(LocalStorage(str(output_dir)))


@pytest.fixture
def offline_remover() -> BackgroundRemovalClient:
    """Client with no API key: never calls out."""
    return BackgroundRemovalClient(api_key="", enabled=False)


@pytest.fixture
def make_compositor(storage, offline_remover, tmp_path) -> Callable[..., ImageCompositor]:
    """Factory for a compositor wired to temporary directories."""
    def _make(overlay_base: Path, background_remover=None) -> ImageCompositor:
        return ImageCompositor(
            overlay_loader=OverlayLoader(overlay_base),
            background_remover=background_remover or offline_remover,
            storage=storage,
            temp_dir=str(tmp_path),
        )
    return _make
