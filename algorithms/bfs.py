"""
bfs.py — Breadth-First Search
==============================
FIFO search.  A cell is marked visited (and logged) when it is
ENQUEUED, so the start cell is the first entry of the log and every
cell appears at most once.  The destination is recognised when it is
dequeued, which means the cells enqueued alongside it still show up in
the visited order.

distance = parent distance + 1, i.e. the BFS level.
"""

from collections import deque
from typing import List, Optional

from algorithms.search import SearchGrid
from algorithms.step import CellState, PathfindingLog
from model.cell import Cell
from model.grid import Grid


def bfs(grid: Grid, start: Optional[Cell], end: Optional[Cell]) -> PathfindingLog:
    sg = SearchGrid.prepare(grid, start, end)
    if sg is None:
        return PathfindingLog(algorithm="bfs", grid=grid)

    queue = deque([sg.start])
    sg.visited.add(sg.start)
    sg.distance[sg.start] = 0
    visited: List[CellState] = [sg.snapshot(sg.start)]

    while queue:
        node = queue.popleft()

        if node == sg.end:
            return sg.build_log("bfs", grid, visited, found=True)

        for nbr in sg.neighbours(node):
            if nbr in sg.visited or sg.is_wall(nbr):
                continue
            sg.visited.add(nbr)
            sg.distance[nbr] = sg.distance[node] + 1
            sg.parent[nbr]   = node
            visited.append(sg.snapshot(nbr))
            queue.append(nbr)

    return sg.build_log("bfs", grid, visited, found=False)
