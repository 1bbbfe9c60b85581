"""
grid.py — Pathfinding Grid
===========================
The cell matrix the user draws on and the playback engine paints.

Responsibilities:
  1. Cell lookup & 4-neighbour queries     (cell, in_bounds, neighbours)
  2. User edits                             (walls, start, end)
  3. Reset helpers                          (wipe run state, keep walls)
  4. Factory methods                        (generate, from_ascii)
  5. Serialisation round-trip               (to_dict / from_dict)

Design decisions:
  - Cells stored row-major: `cells[y][x]`.
  - Neighbour order is fixed: up, right, down, left.  Every search
    algorithm inherits this order, and it decides which of several
    equally good paths gets found.
  - Algorithms never write to a Grid; they build a private working
    copy (see algorithms/search.py).
"""

import random
from typing import Dict, Iterator, List, Optional, Tuple

from model.cell import Cell

# (dx, dy): up, right, down, left
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


class Grid:
    """
    Attributes:
        width, height : Dimensions in cells.
        cells         : Row-major matrix, cells[y][x].
    """

    def __init__(self, width: int, height: Optional[int] = None):
        if height is None:
            height = width
        self.width:  int              = width
        self.height: int              = height
        self.cells:  List[List[Cell]] = [[Cell(x, y) for x in range(width)] for y in range(height)]

    # ==================================================================
    # LOOKUP
    # ==================================================================
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x},{y}) outside {self.width}x{self.height} grid")
        return self.cells[y][x]

    def neighbours(self, x: int, y: int) -> List[Cell]:
        """In-bounds 4-neighbours in the order up, right, down, left."""
        result = []
        for dx, dy in NEIGHBOUR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                result.append(self.cells[ny][nx])
        return result

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def find_start_and_end(self) -> Tuple[Optional[Cell], Optional[Cell]]:
        start = end = None
        for cell in self:
            if cell.is_start:
                start = cell
            if cell.is_end:
                end = cell
        return start, end

    @property
    def start(self) -> Optional[Cell]:
        return self.find_start_and_end()[0]

    @property
    def end(self) -> Optional[Cell]:
        return self.find_start_and_end()[1]

    def walls(self) -> List[Tuple[int, int]]:
        return [cell.pos for cell in self if cell.is_wall]

    # ==================================================================
    # USER EDITS
    # ==================================================================
    def set_start(self, x: int, y: int) -> Cell:
        """Move the start marker; a wall under it is removed."""
        target = self.cell(x, y)
        for cell in self:
            cell.is_start = False
        target.is_start = True
        target.is_end   = False
        target.is_wall  = False
        return target

    def set_end(self, x: int, y: int) -> Cell:
        target = self.cell(x, y)
        for cell in self:
            cell.is_end = False
        target.is_end   = True
        target.is_start = False
        target.is_wall  = False
        return target

    def toggle_wall(self, x: int, y: int) -> bool:
        """Flip the wall flag.  Start and end are never walled; returns the new flag."""
        cell = self.cell(x, y)
        if cell.is_start or cell.is_end:
            return False
        cell.is_wall = not cell.is_wall
        return cell.is_wall

    # ==================================================================
    # RESET (keep structure, wipe run state)
    # ==================================================================
    def reset_search_state(self) -> None:
        for cell in self:
            cell.reset_search_state()

    # ==================================================================
    # FACTORIES
    # ==================================================================
    @classmethod
    def generate(cls, size: int = 15, seed: Optional[int] = None) -> "Grid":
        """
        Empty size×size grid with a random start and end placed at least
        size // 3 apart (Manhattan distance).
        """
        if size < 2:
            raise ValueError("a grid needs at least 2x2 cells to hold a start and an end")
        rng  = random.Random(seed)
        grid = cls(size)
        min_distance = size // 3
        while True:
            sx, sy = rng.randrange(size), rng.randrange(size)
            ex, ey = rng.randrange(size), rng.randrange(size)
            if (sx, sy) != (ex, ey) and abs(sx - ex) + abs(sy - ey) >= min_distance:
                break
        grid.set_start(sx, sy)
        grid.set_end(ex, ey)
        return grid

    @classmethod
    def from_ascii(cls, text: str) -> "Grid":
        """
        Parse a picture of the grid:

            S..#
            .#..
            ...E

        `#` wall, `S` start, `E` end, anything else open.  Rows must be
        equally long.
        """
        rows = [line.strip() for line in text.strip().splitlines() if line.strip()]
        if not rows:
            raise ValueError("empty grid text")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("ragged grid text: every row needs the same width")

        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch == "#":
                    grid.cells[y][x].is_wall = True
                elif ch == "S":
                    grid.set_start(x, y)
                elif ch == "E":
                    grid.set_end(x, y)
        return grid

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> Dict:
        return {
            "width":  self.width,
            "height": self.height,
            "cells":  [[cell.to_dict() for cell in row] for row in self.cells],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Grid":
        grid = cls(int(data["width"]), int(data["height"]))
        for row in data.get("cells", []):
            for cd in row:
                cell = Cell.from_dict(cd)
                if grid.in_bounds(cell.x, cell.y):
                    grid.cells[cell.y][cell.x] = cell
        return grid

    # ==================================================================
    # DUNDER
    # ==================================================================
    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, walls={len(self.walls())})"
