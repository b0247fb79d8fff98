"""
Reaction-Diffusion Viewer - Entry Point

Usage:
    python -m reaction_diffusion [preset] [--size N] [--window WxH]
                                 [--snap FRAMES] [--invert] [--verbose]

Examples:
    python -m reaction_diffusion
    python -m reaction_diffusion maze
    python -m reaction_diffusion coral --size 300
    python -m reaction_diffusion waves --snap 200

Use --list to see all available presets.
"""

import logging
import os
import sys

from .presets import PRESET_ORDER, list_presets, preset_params


def snap(preset, width, height, frames, inverted=False, out_dir=None):
    """Headless mode: run N display frames, save a PNG, return its path."""
    from PIL import Image

    from .colormaps import field_to_rgb, palette_colors
    from .gray_scott import GrayScott

    engine = GrayScott(width, height, preset_params(preset))

    print(f"  {preset}: running {frames} frames "
          f"({frames * engine.params.updates_per_step} steps)...", end="", flush=True)
    for _ in range(frames):
        engine.advance_frame()

    background, foreground = palette_colors(inverted)
    rgb = field_to_rgb(engine.read_field(), background, foreground)

    screenshots_dir = out_dir or os.path.join(os.getcwd(), "screenshots")
    os.makedirs(screenshots_dir, exist_ok=True)
    path = os.path.join(screenshots_dir, f"rd_{preset}.png")
    Image.fromarray(rgb).save(path)
    print(f" saved: {path}")
    return path


def main(argv=None):
    preset = "default"
    sim_w, sim_h = 500, 500
    snap_frames = 0
    inverted = False
    verbose = False

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--size" and i + 1 < len(args):
                sim_w = sim_h = int(args[i + 1])
                i += 2
            elif arg == "--window" and i + 1 < len(args):
                parts = args[i + 1].split("x")
                sim_w, sim_h = int(parts[0]), int(parts[1])
                i += 2
            elif arg == "--snap" and i + 1 < len(args):
                snap_frames = int(args[i + 1])
                i += 2
            elif arg == "--invert":
                inverted = True
                i += 1
            elif arg in ("--verbose", "-v"):
                verbose = True
                i += 1
            elif arg == "--list":
                print("\nAvailable presets:")
                for key, name, desc in list_presets():
                    print(f"    {key:10s} {name:10s} {desc}")
                print()
                return 0
            elif arg in ("--help", "-h"):
                print(__doc__)
                return 0
            elif arg in PRESET_ORDER:
                preset = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --list to see available presets")
                return 2
    except (ValueError, IndexError):
        print(f"Invalid value for {args[i]}: {args[i + 1]}")
        return 2

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if sim_w <= 0 or sim_h <= 0:
        print(f"Grid size must be positive, got {sim_w}x{sim_h}")
        return 2

    if snap_frames > 0:
        print(f"Headless snap mode: {preset} @ {sim_w}x{sim_h}, {snap_frames} frames")
        snap(preset, sim_w, sim_h, snap_frames, inverted=inverted)
        return 0

    from .viewer import Viewer

    print("Starting Reaction-Diffusion Viewer")
    print(f"  Preset: {preset}")
    print(f"  Grid: {sim_w}x{sim_h}")
    print()

    viewer = Viewer(width=sim_w, height=sim_h, start_preset=preset, inverted=inverted)
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
