"""
Step snapshots and algorithm metadata.

A SortStep is a frozen picture of the working array at one instant,
tagged with the elementary operation that produced it. Traces carry a
full copy of the array in every step so playback can jump to any step
without replaying the ones before it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Tuple

COMPARE = "compare"
SWAP    = "swap"
PIVOT   = "pivot"
MERGE   = "merge"

STEP_TYPES = (COMPARE, SWAP, PIVOT, MERGE)


@dataclass(frozen=True)
class SortStep:
    """
    Attributes
    ----------
    array   : tuple  — copy of the working array after the operation
    type    : str    — compare | swap | pivot | merge
    indices : tuple  — 0-2 positions involved in the operation
    pivot   : int    — index of the current pivot (quick sort only)
    sorted  : bool   — True only on the terminal step of a trace
    """
    array:   Tuple[int, ...]
    type:    str
    indices: Tuple[int, ...] = ()
    pivot:   Optional[int]   = None
    sorted:  bool            = False

    def values(self):
        """Array values at this step's indices."""
        return [self.array[i] for i in self.indices]

    def to_dict(self):
        d = {"array": list(self.array), "type": self.type, "indices": list(self.indices)}
        if self.pivot is not None:
            d["pivot"] = self.pivot
        if self.sorted:
            d["sorted"] = True
        return d


@dataclass(frozen=True)
class AlgorithmInfo:
    name:        str
    best:        str
    average:     str
    worst:       str
    space:       str
    description: str

    @property
    def time_complexity(self):
        return {"best": self.best, "average": self.average, "worst": self.worst}


ALGORITHMS = MappingProxyType({
    "bubble": AlgorithmInfo(
        "Bubble Sort", "O(n)", "O(n²)", "O(n²)", "O(1)",
        "Repeatedly steps through the list, compares adjacent elements "
        "and swaps them if they are in the wrong order.",
    ),
    "insertion": AlgorithmInfo(
        "Insertion Sort", "O(n)", "O(n²)", "O(n²)", "O(1)",
        "Builds the final sorted array one item at a time, inserting "
        "each element into its proper position.",
    ),
    "selection": AlgorithmInfo(
        "Selection Sort", "O(n²)", "O(n²)", "O(n²)", "O(1)",
        "Divides the array into sorted and unsorted regions, repeatedly "
        "selecting the minimum element from the unsorted region.",
    ),
    "merge": AlgorithmInfo(
        "Merge Sort", "O(n log n)", "O(n log n)", "O(n log n)", "O(n)",
        "Divides the array into two halves, recursively sorts them, "
        "and then merges the sorted halves.",
    ),
    "quick": AlgorithmInfo(
        "Quick Sort", "O(n log n)", "O(n log n)", "O(n²)", "O(log n)",
        "Picks a pivot element and partitions the array around it, "
        "recursively sorting the partitions.",
    ),
    "heap": AlgorithmInfo(
        "Heap Sort", "O(n log n)", "O(n log n)", "O(n log n)", "O(1)",
        "Converts the array into a heap data structure and repeatedly "
        "extracts the maximum element.",
    ),
})
