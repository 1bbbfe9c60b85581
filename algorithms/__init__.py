"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, run_sorting, run_pathfinding

REGISTRY is a dict:
    {
        "bubble":   AlgoInfo(key, label, fn, domain, complexity, description),
        "dijkstra": AlgoInfo(...),
        …
    }

Every adapter is a pure function `(input) -> log`.  The engine and UI
both consume AlgoInfo, so adding an algorithm is: write the adapter, add
one entry here.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from algorithms.astar          import astar
from algorithms.bfs            import bfs
from algorithms.bubble_sort    import bubble_sort
from algorithms.dfs            import dfs
from algorithms.dijkstra       import dijkstra
from algorithms.insertion_sort import insertion_sort
from algorithms.merge_sort     import merge_sort
from algorithms.quick_sort     import quick_sort
from algorithms.selection_sort import selection_sort
from algorithms.step import (
    CellState,
    PathfindingLog,
    SortingLog,
    Step,
    StepKind,
)
from model.cell import Cell
from model.grid import Grid
from utils.logger import get_logger

logger = get_logger(__name__)

SORTING     = "sorting"
PATHFINDING = "pathfinding"

DEFAULT_SORTING     = "bubble"
DEFAULT_PATHFINDING = "dijkstra"


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AlgoInfo:
    key:         str          # registry key, e.g. "bfs"
    label:       str          # human label, e.g. "Breadth-First Search"
    fn:          Callable     # the adapter
    domain:      str          # "sorting" | "pathfinding"
    complexity:  str = ""     # e.g. "Time: O(V+E) | Space: O(V)"
    description: str = ""     # paragraph for the info card

    def to_dict(self) -> Dict[str, str]:
        return {
            "key":         self.key,
            "label":       self.label,
            "domain":      self.domain,
            "complexity":  self.complexity,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", fn=bubble_sort, domain=SORTING,
        complexity="Time: O(n²) | Space: O(1)",
        description=(
            "Repeatedly steps through the list, compares adjacent elements and swaps them "
            "if they're in the wrong order. Simplest sorting algorithm but inefficient for "
            "large lists."
        ),
    ),

    "selection": AlgoInfo(
        key="selection", label="Selection Sort", fn=selection_sort, domain=SORTING,
        complexity="Time: O(n²) | Space: O(1)",
        description=(
            "Finds the minimum element from the unsorted portion and places it at the "
            "beginning. Makes only O(n) swaps, useful when writes are expensive."
        ),
    ),

    "insertion": AlgoInfo(
        key="insertion", label="Insertion Sort", fn=insertion_sort, domain=SORTING,
        complexity="Time: O(n²) | Space: O(1)",
        description=(
            "Builds the sorted array one item at a time by comparing each with the already "
            "sorted portion. Efficient for small and nearly-sorted data; used inside hybrids "
            "like Timsort."
        ),
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", fn=quick_sort, domain=SORTING,
        complexity="Time: O(n log n) avg, O(n²) worst | Space: O(log n)",
        description=(
            "Divides the array around a pivot element and recursively sorts the sub-arrays. "
            "Very efficient in practice with excellent average-case performance."
        ),
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", fn=merge_sort, domain=SORTING,
        complexity="Time: O(n log n) | Space: O(n)",
        description=(
            "Divides the array into halves, sorts them separately, then merges them back "
            "together. Guaranteed O(n log n) and stable."
        ),
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=dijkstra, domain=PATHFINDING,
        complexity="Time: O((V+E) log V) | Space: O(V)",
        description=(
            "Finds the shortest path from the start node to every other node in a graph "
            "with non-negative weights. Guarantees optimal paths but explores widely."
        ),
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Algorithm", fn=astar, domain=PATHFINDING,
        complexity="Time: O(E) | Space: O(V)",
        description=(
            "Uses a heuristic to prioritise cells that appear closer to the goal, finding "
            "the shortest path while exploring far less than Dijkstra's."
        ),
    ),

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=bfs, domain=PATHFINDING,
        complexity="Time: O(V+E) | Space: O(V)",
        description=(
            "Explores all neighbours at the present depth before moving to the next level. "
            "Guarantees the shortest path in unweighted graphs."
        ),
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=dfs, domain=PATHFINDING,
        complexity="Time: O(V+E) | Space: O(V)",
        description=(
            "Explores as far as possible along each branch before backtracking. Does NOT "
            "guarantee the shortest path."
        ),
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms(domain: Optional[str] = None) -> List[AlgoInfo]:
    """Registered algorithms in insertion order, optionally for one domain."""
    return [a for a in REGISTRY.values() if domain is None or a.domain == domain]


def _resolve(kind: str, domain: str, default: str) -> AlgoInfo:
    info = REGISTRY.get(kind)
    if info is None or info.domain != domain:
        logger.warning(f"Unknown {domain} algorithm '{kind}', falling back to '{default}'")
        info = REGISTRY[default]
    return info


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------
def run_sorting(kind: str, sequence: Sequence[int]) -> SortingLog:
    """Run a sorting adapter to completion.  Unknown kinds run bubble sort."""
    info = _resolve(kind, SORTING, DEFAULT_SORTING)
    log  = info.fn(sequence)
    logger.debug(f"{info.key}: {len(log)} steps for {len(sequence)} values")
    return log


def run_pathfinding(
    kind: str,
    grid: Grid,
    start: Optional[Cell] = None,
    end: Optional[Cell] = None,
) -> PathfindingLog:
    """
    Run a pathfinding adapter to completion.  Unknown kinds run Dijkstra.
    Missing endpoints are looked up on the grid.
    """
    info = _resolve(kind, PATHFINDING, DEFAULT_PATHFINDING)
    if start is None or end is None:
        found_start, found_end = grid.find_start_and_end()
        start = start if start is not None else found_start
        end   = end if end is not None else found_end
    log = info.fn(grid, start, end)
    logger.debug(
        f"{info.key}: visited {len(log.visited_order)} cells, path length {len(log.path)}"
    )
    return log


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "SORTING",
    "PATHFINDING",
    "get_algorithm",
    "list_algorithms",
    "run_sorting",
    "run_pathfinding",
    "Step",
    "StepKind",
    "SortingLog",
    "CellState",
    "PathfindingLog",
]
