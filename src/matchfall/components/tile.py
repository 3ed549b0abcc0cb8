from dataclasses import dataclass

@dataclass(slots=True)
class Tile:
    """Symbolic tile value (an integer in 1..symbol_count).

    Two tiles may share a value; identity is the owning entity id.
    """
    value: int
