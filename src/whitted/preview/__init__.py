"""Preview module for image output.

Components:
    export: RGBA8 conversion and PNG export

The framebuffer holds unclamped linear colors. Export scales by 255,
clamps and adds an opaque alpha channel.

Example:
    >>> from src.whitted.preview import save_png
    >>> from src.whitted.core.renderer import WhittedRenderer
    >>>
    >>> renderer = WhittedRenderer()
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from src.whitted.preview.export import (
    framebuffer_to_rgba8,
    image_to_rgba8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "framebuffer_to_rgba8",
    "image_to_rgba8",
    "save_png",
    "save_png_from_array",
]
