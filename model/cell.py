"""
cell.py — Grid Cell
====================
One square of the pathfinding grid.

A Cell has coordinate identity: two cells are equal when they sit at
the same (x, y), whatever their flags say.  Static flags (wall / start /
end) are edited by the user between runs; the display flags (visited /
path) and the distance scores are written by the playback engine while
a run is being replayed.
"""

import math
from typing import Any, Dict, Optional, Tuple

INF = math.inf


class Cell:
    """
    Attributes:
        x, y       : Column and row (0-based, origin top-left).
        is_wall    : Obstacle flag — never set on the start or end cell.
        is_start   : Source cell of the search.
        is_end     : Destination cell of the search.
        is_visited : Display flag set during playback.
        is_path    : Display flag set during playback.
        distance   : Cost-so-far shown on the cell (∞ until assigned).
        g, h, f    : A* scores (∞ until assigned).
    """

    __slots__ = (
        "x", "y", "is_wall", "is_start", "is_end",
        "is_visited", "is_path", "distance", "g", "h", "f",
    )

    def __init__(self, x: int, y: int):
        self.x: int           = x
        self.y: int           = y
        self.is_wall: bool    = False
        self.is_start: bool   = False
        self.is_end: bool     = False
        self.is_visited: bool = False
        self.is_path: bool    = False
        self.distance: float  = INF
        self.g: float         = INF
        self.h: float         = INF
        self.f: float         = INF

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------
    def reset_search_state(self) -> None:
        """Forget everything a previous run wrote; keep wall/start/end."""
        self.is_visited = False
        self.is_path    = False
        self.distance   = INF
        self.g          = INF
        self.h          = INF
        self.f          = INF

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "x":          self.x,
            "y":          self.y,
            "is_wall":    self.is_wall,
            "is_start":   self.is_start,
            "is_end":     self.is_end,
            "is_visited": self.is_visited,
            "is_path":    self.is_path,
            "distance":   finite_or_none(self.distance),
            "g":          finite_or_none(self.g),
            "h":          finite_or_none(self.h),
            "f":          finite_or_none(self.f),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        cell = cls(int(data["x"]), int(data["y"]))
        cell.is_wall    = bool(data.get("is_wall", False))
        cell.is_start   = bool(data.get("is_start", False))
        cell.is_end     = bool(data.get("is_end", False))
        cell.is_visited = bool(data.get("is_visited", False))
        cell.is_path    = bool(data.get("is_path", False))
        cell.distance   = none_to_inf(data.get("distance"))
        cell.g          = none_to_inf(data.get("g"))
        cell.h          = none_to_inf(data.get("h"))
        cell.f          = none_to_inf(data.get("f"))
        return cell

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        flags = [name for name in ("wall", "start", "end", "visited", "path") if getattr(self, f"is_{name}")]
        return f"Cell(({self.x},{self.y}){' ' + ','.join(flags) if flags else ''})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Cell) and self.pos == other.pos

    def __hash__(self) -> int:
        return hash(self.pos)


# ---------------------------------------------------------------------------
# JSON has no infinity: ∞ travels as null
# ---------------------------------------------------------------------------
def finite_or_none(value: float) -> Optional[float]:
    return None if value == INF else value


def none_to_inf(value: Optional[float]) -> float:
    return INF if value is None else value
