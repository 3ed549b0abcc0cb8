from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(slots=True)
class Board:
    """Slot grid of tile entity ids, indexed ``slots[row][col]``.

    This grid is the single source of truth for tile placement. A slot is ``None`` only
    between clearing matched tiles and applying gravity/refill.
    """
    rows: int
    cols: int
    slots: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self):
        if not self.slots:
            self.slots = [[None] * self.cols for _ in range(self.rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
