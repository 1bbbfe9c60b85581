"""
selection_sort.py — Selection Sort
===================================
Grows a sorted prefix by repeatedly pulling the minimum of the unsorted
suffix to the front.  Logged events: select, comparison, updateMin,
swap / inPlace, elementPlaced, complete.
"""

from typing import Sequence

from algorithms.step import SortingLog, StepKind, StepRecorder


def selection_sort(values: Sequence[int]) -> SortingLog:
    if not values:
        return SortingLog(algorithm="selection")

    rec = StepRecorder(values)
    arr = rec.array
    n   = len(arr)

    for i in range(n - 1):
        min_index = i
        rec.record(
            StepKind.SELECT, (i, min_index),
            f"Looking for minimum element starting from index {i}",
            (arr[i],),
        )

        for j in range(i + 1, n):
            rec.record(
                StepKind.COMPARISON, (min_index, j),
                f"Comparing current min {arr[min_index]} at index {min_index} with {arr[j]} at index {j}",
                (arr[min_index], arr[j]),
            )
            if arr[j] < arr[min_index]:
                old_min, min_index = min_index, j
                rec.record(
                    StepKind.UPDATE_MIN, (old_min, min_index),
                    f"Found new minimum {arr[min_index]} at index {min_index}",
                    (arr[old_min], arr[min_index]),
                )

        if min_index != i:
            arr[i], arr[min_index] = arr[min_index], arr[i]
            rec.record(
                StepKind.SWAP, (i, min_index),
                f"Placing minimum value {arr[i]} at position {i}",
                (arr[i], arr[min_index]),
            )
        else:
            rec.record(
                StepKind.IN_PLACE, (i,),
                f"Value {arr[i]} already in correct position {i}",
                (arr[i],),
            )

        rec.sorted_positions.add(i)
        rec.record(
            StepKind.ELEMENT_PLACED, (i,),
            f"Element {arr[i]} is now in its final sorted position {i}",
        )

    rec.complete((n - 1,), "Array is sorted", (arr[n - 1],))
    return rec.finish("selection")
