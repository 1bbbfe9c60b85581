"""
insertion_sort.py — Insertion Sort
===================================
Takes each element as a key and shifts larger sorted elements right
until the key's slot opens up.  Logged events: initialize, selectKey,
comparison, shift, insert / alreadySorted, elementInserted, complete.
"""

from typing import Sequence

from algorithms.step import SortingLog, StepKind, StepRecorder


def insertion_sort(values: Sequence[int]) -> SortingLog:
    if not values:
        return SortingLog(algorithm="insertion")

    rec = StepRecorder(values)
    arr = rec.array
    n   = len(arr)

    rec.sorted_positions.add(0)
    rec.record(
        StepKind.INITIALIZE, (0,),
        f"Starting with first element {arr[0]} which is already sorted",
        (arr[0],),
    )

    for i in range(1, n):
        key = arr[i]
        rec.record(
            StepKind.SELECT_KEY, (i,),
            f"Selecting element {key} at position {i} to insert into sorted portion",
            (key,),
        )

        j = i - 1
        while j >= 0:
            rec.record(
                StepKind.COMPARISON, (j, i),
                f"Comparing {arr[j]} with key {key}",
                (arr[j], key),
            )
            if arr[j] <= key:
                break

            arr[j + 1] = arr[j]
            rec.record(
                StepKind.SHIFT, (j, j + 1),
                f"Shifting {arr[j]} one position to the right",
                (arr[j], arr[j + 1]),
            )
            j -= 1

        arr[j + 1] = key
        if j + 1 != i:
            rec.record(StepKind.INSERT, (j + 1,), f"Inserting {key} at position {j + 1}", (key,))
        else:
            rec.record(StepKind.ALREADY_SORTED, (i,), f"{key} is already in the correct sorted position", (key,))

        rec.sorted_positions.add(i)
        rec.record(StepKind.ELEMENT_INSERTED, (0, i), f"Elements 0 through {i} are now sorted")

    rec.complete()
    return rec.finish("insertion")
