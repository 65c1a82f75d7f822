"""
Multi-Scale Turing Patterns - Headless Runner

Usage:
    python -m turing_patterns [preset] [--size WxH] [--scales N]
                              [--steps N] [--every N]

Examples:
    python -m turing_patterns
    python -m turing_patterns classic --scales 5 --steps 200
    python -m turing_patterns wide --size 400x300 --every 10

Runs the engine without a display and prints image statistics as it goes.

Use --list to see all available presets.
"""

import sys
import time

from .patterns import MAX_SCALES, PRESET_ORDER, list_presets
from .simulator import TuringSimulator

MIN_WIDTH = 100   # Smallest image the runner accepts
MIN_HEIGHT = 100


def _print_stats(stats, elapsed):
    print(f"  gen {stats['generation']:5d}  scales {stats['scales']}  "
          f"mean {stats['mean']:.4f}  "
          f"range [{stats['min']:.3f}, {stats['max']:.3f}]  "
          f"{elapsed:.2f}s")


def run(preset, width, height, scales, steps, every):
    """Build a simulator and step it, printing stats every `every` steps."""
    sim = TuringSimulator(width, height, preset=preset, start_scales=scales)
    start = time.time()
    for i in range(steps):
        sim.step()
        if every > 0 and (i + 1) % every == 0:
            _print_stats(sim.stats, time.time() - start)
    if steps == 0 or every <= 0 or steps % every != 0:
        _print_stats(sim.stats, time.time() - start)
    return sim


def _usage_error(msg):
    print(msg)
    print(f"Width must be >= {MIN_WIDTH}, height >= {MIN_HEIGHT}, "
          f"scales 1..{MAX_SCALES}")
    print("Use --help for usage, --list to see available presets")
    return 1


def main(argv=None):
    preset = "classic"
    width, height = 512, 512
    scales = 1
    steps = 100
    every = 10

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--size" and i + 1 < len(args):
                parts = args[i + 1].split("x")
                width, height = int(parts[0]), int(parts[1])
                i += 2
            elif arg == "--scales" and i + 1 < len(args):
                scales = int(args[i + 1])
                i += 2
            elif arg == "--steps" and i + 1 < len(args):
                steps = int(args[i + 1])
                i += 2
            elif arg == "--every" and i + 1 < len(args):
                every = int(args[i + 1])
                i += 2
            elif arg == "--list":
                print("\nAvailable presets:")
                for key, name, desc in list_presets():
                    print(f"    {key:16s} {name:20s} {desc}")
                print()
                return 0
            elif arg in ("--help", "-h"):
                print(__doc__)
                return 0
            elif arg in PRESET_ORDER:
                preset = arg
                i += 1
            else:
                return _usage_error(f"Unknown argument: {arg}")
    except (ValueError, IndexError):
        return _usage_error(f"Bad value for {args[i]}")

    if width < MIN_WIDTH or height < MIN_HEIGHT:
        return _usage_error(f"Image too small: {width}x{height}")
    if not 1 <= scales <= MAX_SCALES:
        return _usage_error(f"Bad scale count: {scales}")

    print("Multi-scale Turing patterns")
    print(f"  Preset: {preset}")
    print(f"  Size: {width}x{height}")
    print(f"  Scales: {scales}")
    print(f"  Steps: {steps}")
    print()

    run(preset, width, height, scales, steps, every)
    return 0


if __name__ == "__main__":
    sys.exit(main())
