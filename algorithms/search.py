"""
search.py — Working Copy for Grid Searches
===========================================
Every pathfinding adapter runs on a SearchGrid, never on the caller's
Grid.  Dimensions and walls are read once and never written; the per-run
scores, visited flags and parent links live in plain dicts keyed by
(x, y).

    sg = SearchGrid.prepare(grid, start, end)
    if sg is None:              # missing / out-of-bounds / walled endpoint
        return PathfindingLog(algorithm="bfs", grid=grid)
"""

import math
from typing import Dict, FrozenSet, List, Optional, Tuple

from algorithms.step import CellState, PathfindingLog
from model.cell import Cell
from model.grid import NEIGHBOUR_OFFSETS, Grid

Pos = Tuple[int, int]

INF = math.inf


def manhattan(a: Pos, b: Pos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class SearchGrid:
    """
    Attributes:
        width, height : Grid dimensions.
        walls         : Frozen set of walled coordinates.
        start, end    : Endpoint coordinates.
        distance      : Display distance per coordinate (∞ if unset).
        g, h, f       : A* scores per coordinate (∞ if unset).
        visited       : Coordinates the search has marked visited.
        parent        : Coordinate → predecessor on the best known route.
    """

    def __init__(self, width: int, height: int, walls: FrozenSet[Pos], start: Pos, end: Pos):
        self.width    = width
        self.height   = height
        self.walls    = walls
        self.start    = start
        self.end      = end
        self.distance: Dict[Pos, float]          = {}
        self.g:        Dict[Pos, float]          = {}
        self.h:        Dict[Pos, float]          = {}
        self.f:        Dict[Pos, float]          = {}
        self.visited:  set                       = set()
        self.parent:   Dict[Pos, Optional[Pos]]  = {start: None}

    @classmethod
    def prepare(cls, grid: Grid, start: Optional[Cell], end: Optional[Cell]) -> Optional["SearchGrid"]:
        """None when either endpoint is missing, outside the grid, or a wall."""
        if start is None or end is None:
            return None
        for cell in (start, end):
            if not grid.in_bounds(cell.x, cell.y) or grid.cell(cell.x, cell.y).is_wall:
                return None
        return cls(grid.width, grid.height, frozenset(grid.walls()), start.pos, end.pos)

    # ------------------------------------------------------------------
    def in_bounds(self, pos: Pos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, pos: Pos) -> bool:
        return pos in self.walls

    def neighbours(self, pos: Pos) -> List[Pos]:
        """Up, right, down, left — walls included, callers filter."""
        x, y = pos
        result = []
        for dx, dy in NEIGHBOUR_OFFSETS:
            nxt = (x + dx, y + dy)
            if self.in_bounds(nxt):
                result.append(nxt)
        return result

    def open_cells(self) -> List[Pos]:
        """All non-wall coordinates, row-major."""
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in self.walls
        ]

    # ------------------------------------------------------------------
    def snapshot(self, pos: Pos) -> CellState:
        return CellState(
            x=pos[0],
            y=pos[1],
            distance=self.distance.get(pos, INF),
            g=self.g.get(pos, INF),
            h=self.h.get(pos, INF),
            f=self.f.get(pos, INF),
            is_start=pos == self.start,
            is_end=pos == self.end,
        )

    def path_to(self, target: Pos) -> List[Pos]:
        path: List[Pos] = []
        cur: Optional[Pos] = target
        while cur is not None:
            path.append(cur)
            cur = self.parent.get(cur)
        path.reverse()
        return path

    def build_log(self, algorithm: str, grid: Grid, visited: List[CellState], found: bool) -> PathfindingLog:
        path = tuple(self.snapshot(p) for p in self.path_to(self.end)) if found else ()
        return PathfindingLog(
            algorithm=algorithm,
            visited_order=tuple(visited),
            path=path,
            grid=grid,
        )
