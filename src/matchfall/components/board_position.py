from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Cached logical slot of a tile; only board operations write it."""
    row: int
    col: int
