from dataclasses import dataclass

@dataclass(slots=True)
class Motion:
    """Continuous visual position of a tile in layout space (y grows downward)."""
    x: float = 0.0
    y: float = 0.0
