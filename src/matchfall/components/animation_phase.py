"""Per-tile animation phase as a closed set of variants."""
from dataclasses import dataclass
from typing import Union


@dataclass(slots=True)
class Idle:
    """At rest (or easing back onto its target after an external nudge)."""


@dataclass(slots=True)
class Sliding:
    """Easing toward the target slot after a swap."""


@dataclass(slots=True)
class Falling:
    velocity: float = 0.0


@dataclass(slots=True)
class Spawning:
    """New tile whose first visual row is ``offset_row`` (negative: above the board)."""
    offset_row: int


@dataclass(slots=True)
class Clearing:
    scale: float = 1.0


AnimationPhase = Union[Idle, Sliding, Falling, Spawning, Clearing]


@dataclass(slots=True)
class TileAnimation:
    phase: AnimationPhase

    @property
    def scale(self) -> float:
        if isinstance(self.phase, Clearing):
            return self.phase.scale
        return 1.0

    @property
    def is_clearing(self) -> bool:
        return isinstance(self.phase, Clearing)
