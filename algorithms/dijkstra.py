"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Unit-weight Dijkstra over the 4-connected grid.

The unvisited set is a plain list in row-major order, re-sorted by
distance before every pop.  list.sort is stable, so cells at equal
distance come out in row-major order and the visitation order is fully
deterministic.  A priority queue would be faster but would pick a
different (equally short) path on ties.

Terminates when:
  1. The destination is popped        →  path reconstructed
  2. The closest remaining cell is ∞  →  destination unreachable
"""

from typing import List, Optional

from algorithms.search import INF, SearchGrid
from algorithms.step import CellState, PathfindingLog
from model.cell import Cell
from model.grid import Grid


def dijkstra(grid: Grid, start: Optional[Cell], end: Optional[Cell]) -> PathfindingLog:
    sg = SearchGrid.prepare(grid, start, end)
    if sg is None:
        return PathfindingLog(algorithm="dijkstra", grid=grid)

    sg.distance[sg.start] = 0
    unvisited = sg.open_cells()
    visited: List[CellState] = []

    while unvisited:
        unvisited.sort(key=lambda p: sg.distance.get(p, INF))
        closest = unvisited.pop(0)

        if sg.distance.get(closest, INF) == INF:
            return sg.build_log("dijkstra", grid, visited, found=False)

        sg.visited.add(closest)
        visited.append(sg.snapshot(closest))

        if closest == sg.end:
            return sg.build_log("dijkstra", grid, visited, found=True)

        # relax
        candidate = sg.distance[closest] + 1
        for nbr in sg.neighbours(closest):
            if nbr in sg.visited or sg.is_wall(nbr):
                continue
            if candidate < sg.distance.get(nbr, INF):
                sg.distance[nbr] = candidate
                sg.parent[nbr]   = closest

    return sg.build_log("dijkstra", grid, visited, found=False)
