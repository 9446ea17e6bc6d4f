"""
Raster effects used by the compositor

All helpers work on float32 RGBA arrays with values in [0, 1] and
straight (non-premultiplied) alpha, shape (height, width, 4).
"""
from typing import Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from possessao.utils.logger import get_logger

logger = get_logger(__name__)

# (position along the radius in [0, 1], alpha in [0, 255])
GradientStop = Tuple[float, int]

EDGE_BLUR_FACTOR = 25
EDGE_BLUR_RADIUS = 0.65
EDGE_BLUR_STOPS: Sequence[GradientStop] = ((0.5, 0), (1.0, 255))

DARKEN_FACTOR = 0.7

OVERLAY_ALPHA_FRONT = 130
OVERLAY_ALPHA_REAR = 150


def to_array(image: Image.Image) -> np.ndarray:
    """PIL image -> float RGBA array"""
    return np.asarray(image.convert("RGBA"), dtype=np.float32) / 255.0


def to_image(array: np.ndarray) -> Image.Image:
    """float RGBA array -> PIL RGBA image"""
    data = np.clip(np.rint(array * 255.0), 0, 255).astype(np.uint8)
    return Image.fromarray(data)


def alpha_over(dst: np.ndarray, src: np.ndarray, opacity: float = 1.0) -> np.ndarray:
    """
    Source-over composite of src on dst

    Args:
        dst: Background RGBA array
        src: Foreground RGBA array of the same shape
        opacity: Extra multiplier on the source alpha (a paint alpha)

    Returns:
        New RGBA array
    """
    src_a = src[..., 3:4] * opacity
    dst_a = dst[..., 3:4]
    out_a = src_a + dst_a * (1.0 - src_a)

    out_rgb = src[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a)
    safe_a = np.where(out_a > 0, out_a, 1.0)
    out_rgb = np.where(out_a > 0, out_rgb / safe_a, 0.0)

    return np.concatenate([out_rgb, out_a], axis=-1).astype(np.float32)


def solid_layer(
    width: int,
    height: int,
    rgb: Tuple[int, int, int],
    alpha: np.ndarray
) -> np.ndarray:
    """A single-colour layer with a per-pixel (or scalar) alpha in [0, 255]"""
    layer = np.empty((height, width, 4), dtype=np.float32)
    layer[..., 0] = rgb[0] / 255.0
    layer[..., 1] = rgb[1] / 255.0
    layer[..., 2] = rgb[2] / 255.0
    layer[..., 3] = np.broadcast_to(np.asarray(alpha, dtype=np.float32) / 255.0, (height, width))
    return layer


def radial_alpha(
    width: int,
    height: int,
    radius: float,
    stops: Sequence[GradientStop]
) -> np.ndarray:
    """
    Alpha map of a radial gradient centred on the image

    Values before the first stop and past the last stop are clamped to
    the nearest stop.
    """
    cx = width / 2.0
    cy = height / 2.0
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    # sample pixel centres
    dist = np.hypot(xs + 0.5 - cx, ys + 0.5 - cy)
    t = dist / max(radius, 1e-6)

    positions = [s[0] for s in stops]
    alphas = [float(s[1]) for s in stops]
    return np.interp(t, positions, alphas).astype(np.float32)


def darken(array: np.ndarray, factor: float = DARKEN_FACTOR) -> np.ndarray:
    """Scale colour channels, leave alpha unchanged"""
    out = array.copy()
    out[..., :3] *= factor
    return out


def resample_blur(array: np.ndarray, factor: int = EDGE_BLUR_FACTOR) -> np.ndarray:
    """Blur by shrinking to a tiny raster and stretching back"""
    height, width = array.shape[:2]
    tiny_w = max(2, width // factor)
    tiny_h = max(2, height // factor)
    small = cv2.resize(array, (tiny_w, tiny_h), interpolation=cv2.INTER_AREA)
    return cv2.resize(small, (width, height), interpolation=cv2.INTER_LINEAR)


def edge_blur(array: np.ndarray) -> np.ndarray:
    """
    Keep the centre sharp and progressively blur towards the edges

    A blurred copy is masked by a radial gradient (transparent in the
    centre, opaque at the rim) and drawn over the sharp original.
    """
    height, width = array.shape[:2]
    blurred = resample_blur(array)

    max_radius = float(np.hypot(width / 2.0, height / 2.0))
    mask = radial_alpha(width, height, max_radius * EDGE_BLUR_RADIUS, EDGE_BLUR_STOPS) / 255.0

    masked_blur = blurred.copy()
    masked_blur[..., 3] *= mask

    return alpha_over(array, masked_blur)


def overlay_alpha_for(camera_orientation: str) -> int:
    """Rear-camera photos get a stronger overlay"""
    if "traseira" in (camera_orientation or "").lower():
        return OVERLAY_ALPHA_REAR
    return OVERLAY_ALPHA_FRONT


def blend_overlay(
    base: np.ndarray,
    overlay: Image.Image,
    camera_orientation: str
) -> np.ndarray:
    """
    Darken the base and draw the edge-blurred overlay on top

    The overlay is stretched to the base size without preserving aspect.
    """
    height, width = base.shape[:2]
    scaled = overlay.convert("RGBA").resize((width, height), Image.BILINEAR)
    processed = edge_blur(to_array(scaled))

    alpha = overlay_alpha_for(camera_orientation)
    logger.debug(f"Blending overlay at alpha {alpha} ({camera_orientation})")
    return alpha_over(darken(base), processed, opacity=alpha / 255.0)


def horror_tone(array: np.ndarray) -> np.ndarray:
    """
    Procedural treatment used when no overlay asset exists:
    black wash, dark vignette, red tint and a green rim glow
    """
    height, width = array.shape[:2]
    longest = float(max(width, height))
    out = array

    out = alpha_over(out, solid_layer(width, height, (0, 0, 0), np.float32(85)))

    vignette = radial_alpha(width, height, longest * 0.75, ((0.0, 0), (0.6, 95), (1.0, 160)))
    out = alpha_over(out, solid_layer(width, height, (0, 0, 0), vignette))

    out = alpha_over(out, solid_layer(width, height, (200, 0, 0), np.float32(35)))

    glow = radial_alpha(width, height, longest * 0.9, ((0.7, 0), (1.0, 25)))
    out = alpha_over(out, solid_layer(width, height, (0, 150, 50), glow))

    return out
