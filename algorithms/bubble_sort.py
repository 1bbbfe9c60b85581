"""
bubble_sort.py — Bubble Sort
=============================
Adjacent-pair scan.  Logged events:
  1. comparison     – every pair looked at
  2. swap           – pair was out of order
  3. passComplete   – the largest unsorted value has bubbled into place
  4. complete       – whole array sorted

A pass with no swap ends the sort early; every remaining position is
then sorted too.
"""

from typing import Sequence

from algorithms.step import SortingLog, StepKind, StepRecorder


def bubble_sort(values: Sequence[int]) -> SortingLog:
    if not values:
        return SortingLog(algorithm="bubble")

    rec = StepRecorder(values)
    arr = rec.array
    n   = len(arr)

    for i in range(n):
        swapped = False

        for j in range(n - i - 1):
            rec.record(
                StepKind.COMPARISON, (j, j + 1),
                f"Comparing {arr[j]} and {arr[j + 1]}",
                (arr[j], arr[j + 1]),
            )

            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                swapped = True
                rec.record(
                    StepKind.SWAP, (j, j + 1),
                    f"Swapping {arr[j + 1]} and {arr[j]}",
                    (arr[j], arr[j + 1]),
                )

        last = n - i - 1
        rec.sorted_positions.add(last)
        rec.record(
            StepKind.PASS_COMPLETE, (last,),
            f"Pass {i + 1} complete. Element {arr[last]} is now in its sorted position.",
        )

        if not swapped:
            rec.sorted_positions.update(range(last))
            break

    rec.complete()
    return rec.finish("bubble")
