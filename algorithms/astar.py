"""
astar.py — A* Search
=====================
A* on the 4-connected grid with unit step cost and the Manhattan
heuristic (admissible here, so the path found is a shortest one).

The open list holds at most one entry per cell.  An improved g score
updates the cell's scores in place; the entry keeps its slot and the
stable sort by f before each pop does the rest.

`distance` mirrors f on every touched cell, which is what the grid
displays while A* plays back.
"""

from typing import List, Optional

from algorithms.search import INF, SearchGrid, manhattan
from algorithms.step import CellState, PathfindingLog
from model.cell import Cell
from model.grid import Grid


def astar(grid: Grid, start: Optional[Cell], end: Optional[Cell]) -> PathfindingLog:
    sg = SearchGrid.prepare(grid, start, end)
    if sg is None:
        return PathfindingLog(algorithm="astar", grid=grid)

    src = sg.start
    sg.g[src]        = 0
    sg.h[src]        = manhattan(src, sg.end)
    sg.f[src]        = sg.h[src]
    sg.distance[src] = 0

    open_list = [src]
    in_open   = {src}
    visited: List[CellState] = []

    while open_list:
        open_list.sort(key=lambda p: sg.f.get(p, INF))
        node = open_list.pop(0)
        in_open.discard(node)

        sg.visited.add(node)
        visited.append(sg.snapshot(node))

        if node == sg.end:
            return sg.build_log("astar", grid, visited, found=True)

        for nbr in sg.neighbours(node):
            if nbr in sg.visited or sg.is_wall(nbr):
                continue

            tentative_g = sg.g[node] + 1
            if tentative_g < sg.g.get(nbr, INF):
                sg.parent[nbr]   = node
                sg.g[nbr]        = tentative_g
                sg.h[nbr]        = manhattan(nbr, sg.end)
                sg.f[nbr]        = sg.g[nbr] + sg.h[nbr]
                sg.distance[nbr] = sg.f[nbr]
                if nbr not in in_open:
                    open_list.append(nbr)
                    in_open.add(nbr)

    return sg.build_log("astar", grid, visited, found=False)
