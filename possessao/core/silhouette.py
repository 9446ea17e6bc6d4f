"""
Local subject extraction without a trained model

Assumes the subject sits in the middle of the frame: a seed disc in the
centre grows outwards until it meets strong luminosity edges or leaves
the central region of interest, then the mask boundary is feathered.
"""
from dataclasses import dataclass

import numpy as np
from PIL import Image

from possessao.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SilhouetteParams:
    """Tuning constants for the local extractor"""
    edge_threshold: float = 0.15
    seed_divisor: int = 6  # seed radius = min(w, h) // seed_divisor
    growth_divisor: int = 3  # max iterations = min(w, h) // growth_divisor
    roi_left: float = 0.2
    roi_right: float = 0.8
    roi_top: float = 0.1
    roi_bottom: float = 0.9
    feather_radius: int = 8


DEFAULT_PARAMS = SilhouetteParams()


def luminosity_map(rgb: np.ndarray) -> np.ndarray:
    """Perceived luminosity in [0, 1] from a uint8 RGB array"""
    rgb = rgb.astype(np.float32)
    return (0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]) / 255.0


def edge_map(luminosity: np.ndarray, threshold: float) -> np.ndarray:
    """Central-difference gradient magnitude above threshold; image border is never an edge"""
    height, width = luminosity.shape
    edges = np.zeros((height, width), dtype=bool)
    if height < 3 or width < 3:
        return edges

    gx = np.abs(luminosity[1:-1, 2:] - luminosity[1:-1, :-2])
    gy = np.abs(luminosity[2:, 1:-1] - luminosity[:-2, 1:-1])
    edges[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy) > threshold
    return edges


def seed_mask(width: int, height: int, radius: int) -> np.ndarray:
    """Filled disc centred on the image"""
    cx = width // 2
    cy = height // 2
    ys, xs = np.mgrid[0:height, 0:width]
    dx = xs - cx
    dy = ys - cy
    inside_box = (xs >= cx - radius) & (xs < cx + radius) & (ys >= cy - radius) & (ys < cy + radius)
    return inside_box & (dx * dx + dy * dy < radius * radius)


def grow_mask(
    mask: np.ndarray,
    edges: np.ndarray,
    params: SilhouetteParams = DEFAULT_PARAMS
) -> np.ndarray:
    """
    Grow the mask one 4-neighbour ring per iteration

    Only interior, non-edge pixels inside the region of interest can be added.
    Stops after min(w, h) // growth_divisor iterations or when nothing changes.
    """
    height, width = mask.shape
    mask = mask.copy()

    ys, xs = np.mgrid[0:height, 0:width]
    roi = (
        (xs >= int(width * params.roi_left)) & (xs <= int(width * params.roi_right))
        & (ys >= int(height * params.roi_top)) & (ys <= int(height * params.roi_bottom))
    )
    interior = np.zeros_like(mask)
    interior[1:-1, 1:-1] = True
    allowed = roi & interior & ~edges

    max_iterations = min(width, height) // params.growth_divisor
    iterations = 0
    for iterations in range(1, max_iterations + 1):
        neighbour = np.zeros_like(mask)
        neighbour[:, 1:] |= mask[:, :-1]
        neighbour[:, :-1] |= mask[:, 1:]
        neighbour[1:, :] |= mask[:-1, :]
        neighbour[:-1, :] |= mask[1:, :]

        grow = neighbour & ~mask & allowed
        if not grow.any():
            break
        mask |= grow

    logger.debug(f"Mask grown in {iterations} iteration(s), {int(mask.sum())} pixels")
    return mask


def feather_alpha(mask: np.ndarray, radius: int) -> np.ndarray:
    """
    Alpha proportional to the distance from each foreground pixel to the
    nearest in-bounds background pixel, searched within a square window

    Distances are truncated to whole pixels; pixels with no background in
    the window are fully opaque.
    """
    height, width = mask.shape
    background = np.pad(~mask, radius, mode="constant", constant_values=False)
    distance = np.full((height, width), radius + 1, dtype=np.int64)

    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            d = int(np.sqrt(dx * dx + dy * dy))
            if d > radius:
                # cannot beat the default
                continue
            window = background[radius + dy:radius + dy + height, radius + dx:radius + dx + width]
            np.minimum(distance, np.where(window, d, radius + 1), out=distance)

    alpha = np.minimum(255, distance * 255 // radius)
    return np.where(mask, alpha, 0).astype(np.uint8)


def extract_subject(
    image: Image.Image,
    params: SilhouetteParams = DEFAULT_PARAMS
) -> Image.Image:
    """
    Cut the central subject out of a photo

    Args:
        image: Source photo
        params: Extraction constants

    Returns:
        RGBA image, transparent outside the subject mask
    """
    rgb = np.asarray(image.convert("RGB"), dtype=np.uint8)
    height, width = rgb.shape[:2]

    luminosity = luminosity_map(rgb)
    edges = edge_map(luminosity, params.edge_threshold)

    radius = min(width, height) // params.seed_divisor
    mask = grow_mask(seed_mask(width, height, radius), edges, params)
    alpha = feather_alpha(mask, params.feather_radius)

    rgba = np.dstack([np.where(mask[..., None], rgb, 0).astype(np.uint8), alpha])
    logger.info(f"Local silhouette extracted: {width}x{height}, seed radius {radius}")
    return Image.fromarray(rgba)
