"""
merge_sort.py — Merge Sort
===========================
Top-down recursive merge sort.  Logged events:
  divide, singleElement, beforeMerge, mergeCopy,
  mergeCompare, mergePlacement, afterMerge, complete

Every step carries the (start, end, depth) range being worked on so a
renderer can shade nested merges by recursion depth.
"""

from typing import Sequence

from algorithms.step import SortingLog, StepKind, StepRecorder


def merge_sort(values: Sequence[int]) -> SortingLog:
    if not values:
        return SortingLog(algorithm="merge")

    rec = StepRecorder(values)
    _sort(rec, 0, len(rec.array) - 1, 0)
    rec.complete(clear_merge_ranges=True)
    return rec.finish("merge")


def _sort(rec: StepRecorder, start: int, end: int, depth: int) -> None:
    arr  = rec.array
    span = (start, end, depth)

    if start >= end:
        rec.sorted_positions.add(start)
        rec.record(
            StepKind.SINGLE_ELEMENT, (start,),
            f"Subarray of size 1 at index {start} is already sorted",
            (arr[start],), merge_range=span,
        )
        return

    mid = (start + end) // 2
    rec.record(
        StepKind.DIVIDE, (start, mid, end),
        f"Dividing array from indices {start} to {end} at midpoint {mid}",
        merge_range=span,
    )

    _sort(rec, start, mid, depth + 1)
    _sort(rec, mid + 1, end, depth + 1)

    rec.record(
        StepKind.BEFORE_MERGE, (start, mid, end),
        f"Merging subarrays from indices {start} to {mid} and {mid + 1} to {end}",
        merge_range=span,
    )

    _merge(rec, start, mid, end, depth)

    rec.sorted_positions.update(range(start, end + 1))
    rec.record(
        StepKind.AFTER_MERGE, (start, end),
        f"Merged subarray from indices {start} to {end} is now sorted",
        merge_range=span,
    )


def _merge(rec: StepRecorder, start: int, mid: int, end: int, depth: int) -> None:
    arr   = rec.array
    span  = (start, end, depth)
    left  = arr[start:mid + 1]
    right = arr[mid + 1:end + 1]

    rec.record(
        StepKind.MERGE_COPY, (start, mid, mid + 1, end),
        "Copying subarrays for merge: "
        f"Left [{', '.join(map(str, left))}], Right [{', '.join(map(str, right))}]",
        merge_range=span,
    )

    li = ri = 0
    k  = start
    while li < len(left) and ri < len(right):
        rec.record(
            StepKind.MERGE_COMPARE, (start + li, mid + 1 + ri),
            f"Comparing {left[li]} and {right[ri]}",
            (left[li], right[ri]), merge_range=span,
        )
        if left[li] <= right[ri]:
            arr[k] = left[li]
            rec.record(
                StepKind.MERGE_PLACEMENT, (k,),
                f"Placing {left[li]} from left subarray at position {k}",
                (left[li],), merge_range=span,
            )
            li += 1
        else:
            arr[k] = right[ri]
            rec.record(
                StepKind.MERGE_PLACEMENT, (k,),
                f"Placing {right[ri]} from right subarray at position {k}",
                (right[ri],), merge_range=span,
            )
            ri += 1
        k += 1

    for side, rest in (("left", left[li:]), ("right", right[ri:])):
        for value in rest:
            arr[k] = value
            rec.record(
                StepKind.MERGE_PLACEMENT, (k,),
                f"Placing remaining {value} from {side} subarray at position {k}",
                (value,), merge_range=span,
            )
            k += 1
