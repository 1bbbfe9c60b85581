"""
dfs.py — Depth-First Search
============================
Visits cells in the order a recursive DFS would (neighbours tried up,
right, down, left), stopping at the first arrival at the destination.

The recursion is unrolled onto an explicit stack of frames, one
(cell, remaining-neighbours iterator) pair per level, so a long winding
corridor cannot hit Python's recursion limit.

distance = depth from the start cell.  DFS does NOT guarantee a
shortest path.
"""

from typing import Iterator, List, Optional, Tuple

from algorithms.search import Pos, SearchGrid
from algorithms.step import CellState, PathfindingLog
from model.cell import Cell
from model.grid import Grid


def dfs(grid: Grid, start: Optional[Cell], end: Optional[Cell]) -> PathfindingLog:
    sg = SearchGrid.prepare(grid, start, end)
    if sg is None:
        return PathfindingLog(algorithm="dfs", grid=grid)

    visited: List[CellState] = []
    sg.distance[sg.start] = 0

    def enter(pos: Pos) -> bool:
        sg.visited.add(pos)
        visited.append(sg.snapshot(pos))
        return pos == sg.end

    if enter(sg.start):
        return sg.build_log("dfs", grid, visited, found=True)

    stack: List[Tuple[Pos, Iterator[Pos]]] = [(sg.start, iter(sg.neighbours(sg.start)))]
    while stack:
        node, pending = stack[-1]
        for nbr in pending:
            # checked lazily: an earlier sibling's subtree may have reached it
            if nbr in sg.visited or sg.is_wall(nbr):
                continue
            sg.parent[nbr]   = node
            sg.distance[nbr] = sg.distance[node] + 1
            if enter(nbr):
                return sg.build_log("dfs", grid, visited, found=True)
            stack.append((nbr, iter(sg.neighbours(nbr))))
            break
        else:
            stack.pop()

    return sg.build_log("dfs", grid, visited, found=False)
