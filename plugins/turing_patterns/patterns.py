"""
Turing Pattern Scales and Presets

A scale is one activator/inhibitor pair: two blur radii, a weight, the
symmetry order a downstream symmetrizer may enforce, and the small amount
a pixel moves when that scale wins. The engine walks the active scales in
order, so position in the set matters.

Each preset is a ladder of scales, coarse first. Adding a scale appends
the next rung of the ladder; removing one drops the last.
"""

import numbers
from dataclasses import dataclass

MAX_SCALES = 5    # Most scales a set may hold
MIN_SCALES = 1    # A set never shrinks below this
START_SCALES = 1  # Scales active when a simulator starts


@dataclass(frozen=True)
class PatternSpec:
    """One scale of pattern formation."""
    activator_radius: int
    inhibitor_radius: int
    weight: int = 1
    symmetry_order: int = 1
    step_amount: float = 0.05

    def __post_init__(self):
        for field in ("activator_radius", "inhibitor_radius", "weight",
                      "symmetry_order"):
            value = getattr(self, field)
            if not isinstance(value, numbers.Integral):
                raise ValueError(f"{field} must be an integer, got {value!r}")
        if self.activator_radius < 1:
            raise ValueError(
                f"activator_radius must be >= 1, got {self.activator_radius}")
        if self.inhibitor_radius < 1:
            raise ValueError(
                f"inhibitor_radius must be >= 1, got {self.inhibitor_radius}")
        if self.weight < 0:
            raise ValueError(f"weight must be >= 0, got {self.weight}")
        if self.symmetry_order < 1:
            raise ValueError(
                f"symmetry_order must be >= 1, got {self.symmetry_order}")
        if not 0.0 < self.step_amount < 1.0:
            raise ValueError(
                f"step_amount must be in (0, 1), got {self.step_amount}")


class PatternSet:
    """Ordered, bounded list of scales.

    Only grows at the end and shrinks from the end. Requests that would
    cross a bound are refused (return False) and leave the set untouched.
    """

    def __init__(self, specs=(), max_scales=MAX_SCALES, min_scales=MIN_SCALES):
        if min_scales < 1 or max_scales < min_scales:
            raise ValueError(
                f"Invalid scale bounds: min={min_scales}, max={max_scales}")
        specs = list(specs)
        if not min_scales <= len(specs) <= max_scales:
            raise ValueError(
                f"PatternSet needs {min_scales}..{max_scales} scales, "
                f"got {len(specs)}")
        self.max_scales = max_scales
        self.min_scales = min_scales
        self._specs = specs

    def add(self, spec):
        """Append a scale. Returns False if the set is already full."""
        if len(self._specs) >= self.max_scales:
            return False
        self._specs.append(spec)
        return True

    def remove(self):
        """Drop the last scale. Returns False if already at the minimum."""
        if len(self._specs) <= self.min_scales:
            return False
        self._specs.pop()
        return True

    @property
    def specs(self):
        return tuple(self._specs)

    @property
    def is_full(self):
        return len(self._specs) >= self.max_scales

    def __len__(self):
        return len(self._specs)

    def __iter__(self):
        return iter(self._specs)

    def __getitem__(self, index):
        return self._specs[index]

    def __repr__(self):
        return f"PatternSet({self._specs!r})"


def _ladder(act_r, inh_r, weights, symmetry, amounts):
    return [
        PatternSpec(a, i, w, s, sa)
        for a, i, w, s, sa in zip(act_r, inh_r, weights, symmetry, amounts)
    ]


PRESETS = {
    "classic": {
        "name": "Classic",
        "description": "Five octaves from broad blobs down to pixel grain",
        "scales": _ladder(
            act_r=(50, 25, 10, 5, 1),
            inh_r=(100, 50, 20, 10, 2),
            weights=(1, 1, 1, 1, 1),
            symmetry=(2, 1, 4, 1, 1),
            amounts=(0.05, 0.04, 0.03, 0.02, 0.01),
        ),
    },
    "fine": {
        "name": "Fine",
        "description": "Tight radii - dense worms and small cells",
        "scales": _ladder(
            act_r=(20, 10, 5, 2, 1),
            inh_r=(40, 20, 10, 4, 2),
            weights=(1, 1, 1, 1, 1),
            symmetry=(1, 1, 1, 1, 1),
            amounts=(0.04, 0.03, 0.02, 0.015, 0.01),
        ),
    },
    "wide": {
        "name": "Wide",
        "description": "Large radii - slow continents with coastline detail",
        "scales": _ladder(
            act_r=(100, 50, 20, 8, 3),
            inh_r=(200, 100, 40, 16, 6),
            weights=(1, 1, 1, 1, 1),
            symmetry=(1, 2, 1, 1, 1),
            amounts=(0.06, 0.05, 0.04, 0.02, 0.01),
        ),
    },
    "weighted": {
        "name": "Weighted",
        "description": "Classic radii, fine scales weighted up so broad shapes dominate",
        "scales": _ladder(
            act_r=(50, 25, 10, 5, 1),
            inh_r=(100, 50, 20, 10, 2),
            weights=(1, 1, 2, 2, 3),
            symmetry=(1, 1, 1, 1, 1),
            amounts=(0.05, 0.04, 0.03, 0.02, 0.01),
        ),
    },
}

PRESET_ORDER = ["classic", "fine", "wide", "weighted"]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) for presets."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
