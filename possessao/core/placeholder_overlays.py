"""
Placeholder overlay artwork for development

Draws simple occult symbols on a dark translucent background so the
compositor can be exercised before real overlay art exists.
"""
import math
from pathlib import Path
from typing import Iterable, List, Union

import numpy as np
from PIL import Image, ImageDraw

from possessao.core.entities import CAMERA_ORIENTATIONS
from possessao.core.image_effects import radial_alpha, solid_layer, alpha_over, to_image
from possessao.utils.logger import get_logger

logger = get_logger(__name__)

OVERLAY_WIDTH = 800
OVERLAY_HEIGHT = 1200


def _dark_background(width: int, height: int, rgb, alpha: int, vignette_rgb, stops, radius_ratio: float) -> Image.Image:
    canvas = solid_layer(width, height, rgb, np.float32(alpha))
    vignette = radial_alpha(width, height, width * radius_ratio, stops)
    canvas = alpha_over(canvas, solid_layer(width, height, vignette_rgb, vignette))
    return to_image(canvas)


def create_entity_overlay(
    entity_id: str,
    orientation: str,
    width: int = OVERLAY_WIDTH,
    height: int = OVERLAY_HEIGHT
) -> Image.Image:
    """Dark-red vignette with a symbol in the middle and an id caption"""
    image = _dark_background(
        width, height, (20, 0, 20), 120, (100, 0, 0),
        ((0.0, 0), (0.5, 80), (1.0, 160)), 0.6
    )
    draw = ImageDraw.Draw(image, "RGBA")
    stroke = (200, 0, 0, 180)
    cx, cy, r = width / 2, height / 2, min(width, height) * 0.19

    draw.ellipse((cx - r, cy - r, cx + r, cy + r), outline=stroke, width=8)
    if entity_id == "legiao":
        draw.line((cx - r, cy - r, cx + r, cy + r), fill=stroke, width=8)
        draw.line((cx + r, cy - r, cx - r, cy + r), fill=stroke, width=8)
    else:
        # pentagram
        step = 2 * math.pi / 5
        for i in range(5):
            a1 = step * i - math.pi / 2
            a2 = step * (i + 2) - math.pi / 2
            draw.line(
                (cx + r * math.cos(a1), cy + r * math.sin(a1),
                 cx + r * math.cos(a2), cy + r * math.sin(a2)),
                fill=stroke, width=8
            )

    caption = f"{entity_id} ({orientation})"
    draw.text((cx - 4 * len(caption), height - 60), caption, fill=(255, 255, 255, 120))
    return image


def create_default_overlay(
    orientation: str,
    width: int = OVERLAY_WIDTH,
    height: int = OVERLAY_HEIGHT
) -> Image.Image:
    """Generic dark vignette used when an entity has no dedicated art"""
    return _dark_background(width, height, (0, 0, 0), 100, (0, 0, 0), ((0.0, 0), (1.0, 120)), 0.7)


def generate_placeholder_overlays(
    output_dir: Union[str, Path],
    entity_ids: Iterable[str],
    orientations: Iterable[str] = CAMERA_ORIENTATIONS,
    include_defaults: bool = True
) -> List[Path]:
    """
    Write placeholder PNGs named the way the overlay loader expects

    Returns:
        Paths of the files written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    orientations = list(orientations)
    written: List[Path] = []

    for entity_id in entity_ids:
        for orientation in orientations:
            path = output_dir / f"{entity_id}_{orientation}.png"
            create_entity_overlay(entity_id, orientation).save(path, format="PNG")
            written.append(path)
            logger.info(f"Created overlay: {path.name}")

    if include_defaults:
        for orientation in orientations:
            path = output_dir / f"default_{orientation}.png"
            create_default_overlay(orientation).save(path, format="PNG")
            written.append(path)
            logger.info(f"Created overlay: {path.name}")

    return written
