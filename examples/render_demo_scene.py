#!/usr/bin/env python3
"""Render the four-sphere demo scene.

This script demonstrates end-to-end rendering with the Whitted ray tracer.
It builds the demo scene (or loads one from JSON), sets up the camera,
renders a single deterministic pass and writes an RGBA PNG.

Usage:
    python -m examples.render_demo_scene [options]

Options:
    --width WIDTH         Image width in pixels (default: 1024)
    --height HEIGHT       Image height in pixels (default: 768)
    --max-depth DEPTH     Reflection/refraction recursion limit (default: 4)
    --fov DEGREES         Vertical field of view (default: 90)
    --floor               Add a floor plane under the spheres
    --scene PATH          Load the scene from a JSON file instead
    --dump-scene PATH     Write the scene as JSON before rendering
    --output OUTPUT       Output file path (default: demo_scene.png)
    --quiet               Suppress progress output

Example:
    python -m examples.render_demo_scene --width 512 --height 384 --floor
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Whitted demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=4,
        help="Reflection/refraction recursion limit (default: 4)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Vertical field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--floor",
        action="store_true",
        help="Add a floor plane under the spheres",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Load the scene from a JSON file instead of the demo scene",
    )
    parser.add_argument(
        "--dump-scene",
        type=str,
        default=None,
        help="Write the scene as JSON before rendering",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="demo_scene.png",
        help="Output file path (default: demo_scene.png)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_demo_scene(
    width: int = 1024,
    height: int = 768,
    max_depth: int = 4,
    vfov: float = 90.0,
    include_floor: bool = False,
    scene_path: str | None = None,
    dump_path: str | None = None,
    output_path: str = "demo_scene.png",
) -> Path:
    """Render the demo scene (or a scene from JSON) and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Deepest recursion level that is still shaded.
        vfov: Vertical field of view in degrees.
        include_floor: Add a floor plane to the demo scene.
        scene_path: Optional JSON scene file to load instead.
        dump_path: Optional path to write the scene as JSON.
        output_path: Output file path (PNG).

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.whitted.core.renderer import RenderSettings, WhittedRenderer
    from src.whitted.preview.export import save_png
    from src.whitted.scene.demo import create_demo_scene
    from src.whitted.scene.manager import SceneManager

    logger = logging.getLogger("render_demo_scene")

    if scene_path is not None:
        logger.info("Loading scene from %s", scene_path)
        scene = SceneManager()
        scene.from_dict(json.loads(Path(scene_path).read_text()))
    else:
        scene, _ = create_demo_scene(include_floor=include_floor)

    logger.info(
        "Scene: %d spheres, %d planes, %d lights",
        scene.get_sphere_count(),
        scene.get_plane_count(),
        scene.get_light_count(),
    )

    if dump_path is not None:
        Path(dump_path).write_text(json.dumps(scene.to_dict(), indent=2))
        logger.info("Wrote scene to %s", dump_path)

    renderer = WhittedRenderer(
        RenderSettings(width=width, height=height, vfov=vfov, max_depth=max_depth)
    )
    renderer.render()

    output_file = Path(output_path)
    save_png(renderer, str(output_file))
    logger.info("Saved to: %s", output_file.absolute())

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
    except Exception:
        ti.init(arch=ti.cpu)

    try:
        render_demo_scene(
            width=args.width,
            height=args.height,
            max_depth=args.max_depth,
            vfov=args.fov,
            include_floor=args.floor,
            scene_path=args.scene,
            dump_path=args.dump_scene,
            output_path=args.output,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
