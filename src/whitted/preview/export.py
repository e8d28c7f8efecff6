"""Image export utilities for rendered images.

The tracer produces unclamped linear RGB floats. This module converts them
into 8-bit RGBA: each channel is scaled by 255, clamped to [0, 255] and
truncated, and alpha is always fully opaque. No gamma or tone mapping is
applied.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from src.whitted.preview.export import save_png
    >>> from src.whitted.core.renderer import WhittedRenderer
    >>>
    >>> renderer = WhittedRenderer()
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.whitted.core.renderer import WhittedRenderer

ALPHA_OPAQUE = 255


def _to_rgba8(colors: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    if colors.shape[-1] != 3:
        raise ValueError(f"Expected RGB values in the last axis, got shape {colors.shape}")

    rgb = np.clip(colors.astype(np.float32) * 255.0, 0.0, 255.0).astype(np.uint8)
    alpha = np.full(colors.shape[:-1] + (1,), ALPHA_OPAQUE, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


def framebuffer_to_rgba8(buffer: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a flat linear framebuffer to RGBA8.

    Args:
        buffer: Array of shape (N, 3), one row per pixel.

    Returns:
        Array of shape (N, 4) with dtype uint8.

    Raises:
        ValueError: If buffer is not of shape (N, 3).
    """
    if buffer.ndim != 2:
        raise ValueError(f"Expected a (N, 3) framebuffer, got shape {buffer.shape}")
    return _to_rgba8(buffer)


def image_to_rgba8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear (H, W, 3) image to an (H, W, 4) RGBA8 image.

    Raises:
        ValueError: If image is not of shape (H, W, 3).
    """
    if image.ndim != 3:
        raise ValueError(f"Expected a (H, W, 3) image, got shape {image.shape}")
    return _to_rgba8(image)


def save_png(renderer: WhittedRenderer, filepath: str) -> None:
    """Save the renderer's current image as an RGBA PNG file.

    Args:
        renderer: The WhittedRenderer instance to save.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)


def save_png_from_array(image: npt.NDArray[np.float32], filepath: str) -> None:
    """Save a linear (H, W, 3) image array as an RGBA PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(image_to_rgba8(image))
    pil_image.save(filepath)
