"""Camera module for primary ray generation.

This module provides the camera model for generating primary rays:

Components:
    pinhole: Fixed pinhole (perspective) camera at the world origin

Camera responsibilities:
    - Map pixel (i, j) to a unit ray direction through the pixel center
    - Convert the vertical field of view into the image plane distance

Pixel coordinates:
    i in [0, width): left to right across image
    j in [0, height): top to bottom across image

Ray generation runs inside the render kernel, one ray per pixel.
"""

from .pinhole import (
    EYE_POSITION,
    PinholeCamera,
    get_camera_info,
    get_ray,
    get_ray_direction,
    primary_ray_direction,
    setup_camera,
)

__all__ = [
    "EYE_POSITION",
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_ray_direction",
    "get_camera_info",
    "primary_ray_direction",
]
