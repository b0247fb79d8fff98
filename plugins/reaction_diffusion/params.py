"""
Gray-Scott Simulation Parameters

A small config record owned by the engine. Values are not range-checked:
out-of-range rates are accepted and may drive the field to a degenerate
(all-0, all-1 or oscillating) state. Only unknown names are rejected.
"""

import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True)
class Params:
    dA: float = 1.0                # diffusion rate of A
    dB: float = 0.5                # diffusion rate of B
    feed: float = 0.055
    kill: float = 0.062
    dt: float = 1.0
    updates_per_step: int = 10     # steps per display frame
    pattern_half_size: int = 15    # half-size of the centered seed square
    injection_half_size: int = 8   # half-size of click-injected blobs

    @classmethod
    def names(cls):
        return tuple(f.name for f in dataclasses.fields(cls))

    def updated(self, **changes):
        """Return a copy with `changes` applied. Unknown keys raise KeyError."""
        unknown = set(changes) - set(self.names())
        if unknown:
            raise KeyError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        for key in ("updates_per_step", "pattern_half_size", "injection_half_size"):
            if key in changes:
                changes[key] = int(changes[key])
        return dataclasses.replace(self, **changes)

    def as_dict(self):
        return dataclasses.asdict(self)


DEFAULT_PARAMS = Params()
