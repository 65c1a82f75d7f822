"""
TuringSimulator - headless controller for the multi-scale engine

Owns the image and the active scale set and is the only thing that
mutates them. Commands (reset, add/remove scale) take the same lock as
step(), so a command sent from another thread lands between two steps,
never inside one.

Usage:
    from turing_patterns.simulator import TuringSimulator, Command
    sim = TuringSimulator(256, 256, preset="classic", start_scales=3)
    sim.step_n(50)
    sim.handle(Command.ADD_SCALE)
"""

import enum
import threading
import time
import numpy as np

from .engine import TuringEngine, init_image
from .patterns import (
    PRESETS, MAX_SCALES, MIN_SCALES, START_SCALES, PatternSet, get_preset,
)


class Command(str, enum.Enum):
    """Requests the controller accepts between steps."""
    RESET = "reset"
    ADD_SCALE = "add_scale"
    REMOVE_SCALE = "remove_scale"


class TuringSimulator:
    def __init__(self, width=512, height=512, preset="classic",
                 start_scales=START_SCALES, blur=None, rng=None,
                 max_scales=MAX_SCALES):
        if width < 1 or height < 1:
            raise ValueError(
                f"Image size must be positive, got {width}x{height}")
        p = get_preset(preset)
        if p is None:
            raise ValueError(f"Unknown preset: {preset!r}. "
                             f"Available: {list(PRESETS.keys())}")
        ladder = p["scales"]
        if not MIN_SCALES <= start_scales <= min(max_scales, len(ladder)):
            raise ValueError(
                f"start_scales must be in {MIN_SCALES}.."
                f"{min(max_scales, len(ladder))}, got {start_scales}")

        self.width = width
        self.height = height
        self.preset_key = preset
        self.ladder = list(ladder)
        self.patterns = PatternSet(self.ladder[:start_scales],
                                   max_scales=max_scales)
        self.engine = TuringEngine(blur)
        self._rng = rng
        self._lock = threading.Lock()

        self.image = np.empty((height, width), dtype=np.float64)
        init_image(self.image, self._rng)
        self.generation = 0

    def step(self):
        """Advance one step. Returns the image."""
        with self._lock:
            self.engine.step(self.patterns, self.image)
            self.generation += 1
        return self.image

    def step_n(self, n):
        """Advance n steps. Returns the image."""
        for _ in range(n):
            self.step()
        return self.image

    def reset(self):
        """Refill the image with fresh random samples."""
        with self._lock:
            init_image(self.image, self._rng)
            self.generation = 0

    def add_scale(self):
        """Append the next rung of the ladder. Returns False if refused."""
        with self._lock:
            idx = len(self.patterns)
            if idx >= len(self.ladder) or self.patterns.is_full:
                print(f"[TP] Add scale refused: {idx} scales active "
                      f"(max {min(self.patterns.max_scales, len(self.ladder))})")
                return False
            return self.patterns.add(self.ladder[idx])

    def remove_scale(self):
        """Drop the last scale. Returns False if refused."""
        with self._lock:
            if not self.patterns.remove():
                print(f"[TP] Remove scale refused: already at "
                      f"{self.patterns.min_scales} scale(s)")
                return False
            return True

    def apply_preset(self, key):
        """Switch ladders, keeping the number of active scales."""
        p = get_preset(key)
        if p is None:
            raise ValueError(f"Unknown preset: {key!r}. "
                             f"Available: {list(PRESETS.keys())}")
        with self._lock:
            ladder = list(p["scales"])
            count = max(MIN_SCALES, min(len(self.patterns), len(ladder)))
            self.patterns = PatternSet(ladder[:count],
                                       max_scales=self.patterns.max_scales)
            self.ladder = ladder
            self.preset_key = key

    def handle(self, command):
        """Dispatch a Command. Returns the result of the operation."""
        command = Command(command)
        if command is Command.RESET:
            self.reset()
            return True
        if command is Command.ADD_SCALE:
            return self.add_scale()
        return self.remove_scale()

    def snapshot(self):
        """Return a copy of the image taken between steps."""
        with self._lock:
            return self.image.copy()

    @property
    def stats(self):
        """Return current image statistics."""
        with self._lock:
            return {
                "generation": self.generation,
                "scales": len(self.patterns),
                "mean": float(self.image.mean()),
                "min": float(self.image.min()),
                "max": float(self.image.max()),
            }


class TuringBackgroundSim(threading.Thread):
    """Background thread that continuously steps a TuringSimulator.

    Keeps a copy of the latest image available for consumers (renderers,
    symmetrizers) so they never read a field that is mid-update.
    """

    def __init__(self, simulator, target_fps=20):
        if target_fps <= 0:
            raise ValueError(f"target_fps must be > 0, got {target_fps}")
        super().__init__(daemon=True)
        self.simulator = simulator
        self._frame_lock = threading.Lock()
        self._latest_frame = None
        self._running = True
        self._target_fps = target_fps

    def run(self):
        print("[TP] Background simulation thread started")
        while self._running:
            now = time.perf_counter()
            try:
                self.simulator.step()
                frame = self.simulator.snapshot()
                with self._frame_lock:
                    self._latest_frame = frame
            except Exception as e:
                print(f"[TP] Background sim error: {e}")

            elapsed = time.perf_counter() - now
            sleep_time = max(0, (1.0 / self._target_fps) - elapsed)
            if sleep_time > 0:
                time.sleep(sleep_time)
        print("[TP] Background simulation thread stopped")

    def get_latest_frame(self):
        """Return the most recent image copy or None."""
        with self._frame_lock:
            return self._latest_frame

    def stop(self):
        self._running = False
