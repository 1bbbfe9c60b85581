"""
step.py — Step Logs
====================
Every algorithm runs to completion and hands back a log.  The playback
engine replays the log without knowing which algorithm produced it.

Sorting produces a flat SortingLog: one Step per meaningful event, each
carrying a full snapshot of the array at that instant.

Pathfinding produces a PathfindingLog: the cells in the order they were
visited, then the cells of the final path (already source → destination).
The engine treats `visited_order ++ path` as one timeline.

Design decisions:
  - Step / CellState / both logs are frozen dataclasses holding tuples
    and frozensets.  A log is a SNAPSHOT; the adapter is the only writer.
  - StepRecorder is the mutable scratch-pad adapters use, so no adapter
    has to remember to copy the array before recording it.
  - kind is a StepKind, or the raw string when a deserialised log holds
    something this version does not know.  The engine skips those.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple, Union

from model.cell import finite_or_none, none_to_inf


# ---------------------------------------------------------------------------
# Step kinds
# ---------------------------------------------------------------------------
class StepKind(str, Enum):
    # shared
    COMPARISON       = "comparison"
    SWAP             = "swap"
    COMPLETE         = "complete"
    SINGLE_ELEMENT   = "singleElement"
    # bubble
    PASS_COMPLETE    = "passComplete"
    # selection
    SELECT           = "select"
    UPDATE_MIN       = "updateMin"
    IN_PLACE         = "inPlace"
    ELEMENT_PLACED   = "elementPlaced"
    # quick
    PIVOT            = "pivot"
    PIVOT_PLACED     = "pivotPlaced"
    PARTITION_START  = "partitionStart"
    CORRECT          = "correct"
    PIVOT_CORRECT    = "pivotCorrect"
    # insertion
    INITIALIZE       = "initialize"
    SELECT_KEY       = "selectKey"
    SHIFT            = "shift"
    INSERT           = "insert"
    ALREADY_SORTED   = "alreadySorted"
    ELEMENT_INSERTED = "elementInserted"
    # merge
    DIVIDE           = "divide"
    BEFORE_MERGE     = "beforeMerge"
    AFTER_MERGE      = "afterMerge"
    MERGE_COPY       = "mergeCopy"
    MERGE_COMPARE    = "mergeCompare"
    MERGE_PLACEMENT  = "mergePlacement"


COMPARISON_KINDS = frozenset({StepKind.COMPARISON, StepKind.MERGE_COMPARE})
SWAP_KINDS       = frozenset({StepKind.SWAP})

Range      = Tuple[int, int]          # [low, high] inclusive
MergeRange = Tuple[int, int, int]     # (start, end, depth)


def parse_kind(value: Union[str, StepKind]) -> Union[StepKind, str]:
    """StepKind for known values, the raw string otherwise."""
    try:
        return StepKind(value)
    except ValueError:
        return value


# ---------------------------------------------------------------------------
# Sorting step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        kind             : What happened (StepKind, or unknown raw string).
        indices          : Positions involved, in order.
        array            : Value snapshot of the whole array after the event.
        message          : Human-readable narration.
        sorted_positions : Positions known to hold their final value.
        current_values   : Values worth printing next to the bars.
        partition_ranges : Quick sort — [low, high] ranges still being sorted.
        merge_ranges     : Merge sort — (start, end, depth) range being worked.
    """

    kind:             Union[StepKind, str]
    indices:          Tuple[int, ...]                  = ()
    array:            Tuple[int, ...]                  = ()
    message:          str                              = ""
    sorted_positions: FrozenSet[int]                   = frozenset()
    current_values:   Optional[Tuple[int, ...]]        = None
    partition_ranges: Optional[Tuple[Range, ...]]      = None
    merge_ranges:     Optional[Tuple[MergeRange, ...]] = None

    @property
    def kind_name(self) -> str:
        return self.kind.value if isinstance(self.kind, StepKind) else str(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind":             self.kind_name,
            "indices":          list(self.indices),
            "array":            list(self.array),
            "message":          self.message,
            "sorted_positions": sorted(self.sorted_positions),
        }
        if self.current_values is not None:
            data["current_values"] = list(self.current_values)
        if self.partition_ranges is not None:
            data["partition_ranges"] = [list(r) for r in self.partition_ranges]
        if self.merge_ranges is not None:
            data["merge_ranges"] = [list(r) for r in self.merge_ranges]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        current = data.get("current_values")
        parts   = data.get("partition_ranges")
        merges  = data.get("merge_ranges")
        return cls(
            kind=parse_kind(data["kind"]),
            indices=tuple(data.get("indices", ())),
            array=tuple(data.get("array", ())),
            message=data.get("message", ""),
            sorted_positions=frozenset(data.get("sorted_positions", ())),
            current_values=tuple(current) if current is not None else None,
            partition_ranges=tuple(tuple(r) for r in parts) if parts is not None else None,
            merge_ranges=tuple(tuple(r) for r in merges) if merges is not None else None,
        )


@dataclass(frozen=True)
class SortingLog:
    algorithm: str
    steps:     Tuple[Step, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def final_array(self) -> Tuple[int, ...]:
        return self.steps[-1].array if self.steps else ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain":    "sorting",
            "algorithm": self.algorithm,
            "steps":     [s.to_dict() for s in self.steps],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SortingLog":
        return cls(
            algorithm=data.get("algorithm", ""),
            steps=tuple(Step.from_dict(s) for s in data.get("steps", [])),
        )


# ---------------------------------------------------------------------------
# Recorder — mutable scratch-pad for sorting adapters
# ---------------------------------------------------------------------------
class StepRecorder:
    """
    Owns the working array and the bookkeeping sets, and appends frozen
    Steps on demand.

    Usage inside an adapter:
        rec = StepRecorder(values)
        arr = rec.array
        rec.record(StepKind.COMPARISON, (j, j + 1), f"Comparing …", (arr[j], arr[j + 1]))
        return rec.finish("bubble")
    """

    def __init__(self, values: Sequence[int], track_partitions: bool = False):
        self.array:            List[int]       = list(values)
        self.sorted_positions: Set[int]        = set()
        self.partition_ranges: List[Range]     = []
        self.steps:            List[Step]      = []
        self._track_partitions: bool           = track_partitions

    def record(
        self,
        kind: StepKind,
        indices: Sequence[int],
        message: str,
        current_values: Optional[Sequence[int]] = None,
        merge_range: Optional[MergeRange] = None,
    ) -> Step:
        step = Step(
            kind=kind,
            indices=tuple(indices),
            array=tuple(self.array),
            message=message,
            sorted_positions=frozenset(self.sorted_positions),
            current_values=tuple(current_values) if current_values is not None else None,
            partition_ranges=tuple(self.partition_ranges) if self._track_partitions else None,
            merge_ranges=(merge_range,) if merge_range is not None else None,
        )
        self.steps.append(step)
        return step

    def complete(
        self,
        indices: Sequence[int] = (),
        message: str = "Array sorting complete",
        current_values: Optional[Sequence[int]] = None,
        clear_merge_ranges: bool = False,
    ) -> Step:
        """Final step: every position sorted, no live partition ranges."""
        self.sorted_positions = set(range(len(self.array)))
        self.partition_ranges = []
        step = self.record(StepKind.COMPLETE, indices, message, current_values)
        if clear_merge_ranges:
            step = replace(step, merge_ranges=())
            self.steps[-1] = step
        return step

    def finish(self, algorithm: str) -> SortingLog:
        return SortingLog(algorithm=algorithm, steps=tuple(self.steps))


# ---------------------------------------------------------------------------
# Pathfinding log
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CellState:
    """A cell as the search saw it at the moment it was logged."""

    x:        int
    y:        int
    distance: float = math.inf
    g:        float = math.inf
    h:        float = math.inf
    f:        float = math.inf
    is_start: bool  = False
    is_end:   bool  = False

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x":        self.x,
            "y":        self.y,
            "distance": finite_or_none(self.distance),
            "g":        finite_or_none(self.g),
            "h":        finite_or_none(self.h),
            "f":        finite_or_none(self.f),
            "is_start": self.is_start,
            "is_end":   self.is_end,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CellState":
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            distance=none_to_inf(data.get("distance")),
            g=none_to_inf(data.get("g")),
            h=none_to_inf(data.get("h")),
            f=none_to_inf(data.get("f")),
            is_start=bool(data.get("is_start", False)),
            is_end=bool(data.get("is_end", False)),
        )


@dataclass(frozen=True)
class PathfindingLog:
    """
    Attributes:
        algorithm     : Registry key of the algorithm that ran.
        visited_order : Cells in visitation order.
        path          : Cells of the found path, source → destination
                        (empty when the destination is unreachable).
        grid          : The caller's grid the run was made on.  Not part of
                        equality or serialisation.
    """

    algorithm:     str
    visited_order: Tuple[CellState, ...] = ()
    path:          Tuple[CellState, ...] = ()
    grid:          Any                   = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.visited_order) + len(self.path)

    @property
    def found(self) -> bool:
        return bool(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain":        "pathfinding",
            "algorithm":     self.algorithm,
            "visited_order": [c.to_dict() for c in self.visited_order],
            "path":          [c.to_dict() for c in self.path],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], grid: Any = None) -> "PathfindingLog":
        return cls(
            algorithm=data.get("algorithm", ""),
            visited_order=tuple(CellState.from_dict(c) for c in data.get("visited_order", [])),
            path=tuple(CellState.from_dict(c) for c in data.get("path", [])),
            grid=grid,
        )
