"""
quick_sort.py — Quick Sort (Lomuto)
====================================
Pivot is always the last element of the active range; elements ≤ pivot
move left.  Logged events:
  pivot, partitionStart, comparison, swap / correct,
  swap / pivotCorrect (pivot placement), pivotPlaced,
  singleElement, complete

Every step carries `partition_ranges`: the [low, high] sub-ranges still
waiting to be sorted.  A range is added before recursing into it and
removed once that recursion returns, so a renderer can show the current
divide-and-conquer scope.
"""

from typing import Sequence

from algorithms.step import SortingLog, StepKind, StepRecorder


def quick_sort(values: Sequence[int]) -> SortingLog:
    if not values:
        return SortingLog(algorithm="quick")

    rec = StepRecorder(values, track_partitions=True)
    _sort(rec, 0, len(rec.array) - 1)
    rec.complete()
    return rec.finish("quick")


def _sort(rec: StepRecorder, low: int, high: int) -> None:
    arr = rec.array

    if low < high:
        rec.record(
            StepKind.PIVOT, (high,),
            f"Choosing pivot: {arr[high]} at index {high}",
            (arr[high],),
        )

        p = _partition(rec, low, high)

        rec.sorted_positions.add(p)
        rec.record(
            StepKind.PIVOT_PLACED, (p,),
            f"Pivot {arr[p]} placed at its final position {p}",
            (arr[p],),
        )

        left  = (low, p - 1)
        right = (p + 1, high)
        if low < p - 1:
            rec.partition_ranges.append(left)
        if p + 1 < high:
            rec.partition_ranges.append(right)

        _sort(rec, low, p - 1)
        _sort(rec, p + 1, high)

        if low < p - 1 and left in rec.partition_ranges:
            rec.partition_ranges.remove(left)
        if p + 1 < high and right in rec.partition_ranges:
            rec.partition_ranges.remove(right)

    elif low == high and low >= 0:
        rec.sorted_positions.add(low)
        rec.record(
            StepKind.SINGLE_ELEMENT, (low,),
            f"Single element {arr[low]} at index {low} is already sorted",
            (arr[low],),
        )


def _partition(rec: StepRecorder, low: int, high: int) -> int:
    arr   = rec.array
    pivot = arr[high]
    i     = low - 1

    rec.record(
        StepKind.PARTITION_START, (low, high),
        f"Partitioning array from index {low} to {high} with pivot {pivot}",
        (pivot,),
    )

    for j in range(low, high):
        rec.record(
            StepKind.COMPARISON, (j, high),
            f"Comparing {arr[j]} with pivot value {pivot}",
            (arr[j], pivot),
        )
        if arr[j] <= pivot:
            i += 1
            if i != j:
                arr[i], arr[j] = arr[j], arr[i]
                rec.record(
                    StepKind.SWAP, (i, j),
                    f"Moving {arr[i]} to left partition (≤ pivot)",
                    (arr[i], arr[j]),
                )
            else:
                rec.record(
                    StepKind.CORRECT, (i,),
                    f"{arr[i]} already in correct side of partition (≤ pivot)",
                    (arr[i],),
                )

    if i + 1 != high:
        arr[i + 1], arr[high] = arr[high], arr[i + 1]
        rec.record(
            StepKind.SWAP, (i + 1, high),
            f"Placing pivot: Swapping {arr[i + 1]} with pivot {arr[high]}",
            (arr[i + 1], arr[high]),
        )
    else:
        rec.record(
            StepKind.PIVOT_CORRECT, (high,),
            f"Pivot {arr[high]} already in correct position",
            (arr[high],),
        )

    return i + 1
