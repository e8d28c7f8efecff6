"""High-level renderer wrapping the Whitted integrator.

This module provides a convenient wrapper around the core integrator that
bundles the image settings, camera setup and framebuffer readback behind a
single object. A render is a single deterministic pass: every pixel is traced
once, so there is nothing to accumulate and re-rendering an unchanged scene
produces the same image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.renderer import RenderSettings, WhittedRenderer
    >>> from src.whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> renderer = WhittedRenderer(RenderSettings(width=1024, height=768))
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.whitted.camera.pinhole import PinholeCamera, setup_camera
from src.whitted.core.integrator import (
    MAX_DEPTH,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    MAX_SUPPORTED_DEPTH,
    clear_render_target,
    get_framebuffer_numpy,
    get_image_numpy,
    render_image,
    setup_render_target,
)

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Image and tracing parameters for a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        vfov: Vertical field of view in degrees.
        max_depth: Deepest recursion level that is still shaded.
    """

    width: int = 1024
    height: int = 768
    vfov: float = 90.0
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions ({self.width}x{self.height}) must be positive")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if not 0 <= self.max_depth <= MAX_SUPPORTED_DEPTH:
            raise ValueError(
                f"max_depth = {self.max_depth} must be in [0, {MAX_SUPPORTED_DEPTH}]"
            )
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov = {self.vfov} must be in (0, 180) degrees")


class WhittedRenderer:
    """A single-pass renderer for the current scene.

    The renderer owns the image settings and the camera configuration and
    delegates to the global integrator buffers (which are Taichi fields).
    The scene itself is whatever was last built with SceneManager.

    Attributes:
        settings: The active RenderSettings.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Args:
            settings: Render settings. Defaults to RenderSettings().

        Raises:
            ValueError: If dimensions exceed maximum supported size.
        """
        self.settings = settings if settings is not None else RenderSettings()
        self._configure()

    def _configure(self) -> None:
        setup_render_target(self.settings.width, self.settings.height)
        setup_camera(PinholeCamera(vfov=self.settings.vfov))

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.height

    def resize(self, width: int, height: int) -> None:
        """Change the image size and clear the framebuffer.

        Args:
            width: New image width in pixels.
            height: New image height in pixels.

        Raises:
            ValueError: If dimensions are invalid.
        """
        self.settings = RenderSettings(
            width=width,
            height=height,
            vfov=self.settings.vfov,
            max_depth=self.settings.max_depth,
        )
        self._configure()

    def reset(self) -> None:
        """Clear the framebuffer to black without changing settings."""
        clear_render_target()

    def render(self) -> float:
        """Trace every pixel of the image.

        Returns:
            Elapsed wall-clock time in seconds. The first render at a given
            max_depth includes kernel compilation.
        """
        s = self.settings
        logger.info(
            "Rendering %dx%d (vfov=%.1f, max_depth=%d)", s.width, s.height, s.vfov, s.max_depth
        )
        setup_camera(PinholeCamera(vfov=s.vfov))

        start = time.perf_counter()
        render_image(s.max_depth)
        elapsed = time.perf_counter() - start

        logger.info("Render finished in %.3f s", elapsed)
        return elapsed

    def get_framebuffer_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear framebuffer as an array of shape (width * height, 3)."""
        return get_framebuffer_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear image as an array of shape (height, width, 3).

        Values are not clamped; highlights and bright reflections may
        exceed 1.0.
        """
        return get_image_numpy()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        s = self.settings
        return (
            f"WhittedRenderer(width={s.width}, height={s.height}, "
            f"vfov={s.vfov}, max_depth={s.max_depth})"
        )
