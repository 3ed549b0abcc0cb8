"""Round state resource describing the controller's current mode."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

Position = Tuple[int, int]


class RoundMode(Enum):
    """Discrete modes of the swap/match/refill cycle."""
    IDLE = auto()
    SWAPPED = auto()
    MATCHING = auto()
    REFILLING = auto()
    REVERTING = auto()


@dataclass(slots=True)
class RoundState:
    """Singleton component shared by the round controller and its observers.

    pending_swap is only meaningful while in SWAPPED or REVERTING.
    cascade_depth counts match batches since the last accepted swap.
    """
    mode: RoundMode = RoundMode.IDLE
    pending_swap: Optional[Tuple[Position, Position]] = None
    score: int = 0
    cascade_depth: int = 0
    animating: bool = False
