from .algorithms import (
    SORTERS,
    bubble_sort,
    generate_trace,
    heap_sort,
    insertion_sort,
    is_sorted_trace,
    merge_sort,
    quick_sort,
    selection_sort,
)
from .arrays import generate_random_array, shuffle_array
from .playback import PlaybackController, PlaybackState, PlaybackStatus
from .scheduler import ManualClock, Scheduler
from .session import VisualizerSession
from .sound import SonificationMapper, value_to_frequency
from .steps import ALGORITHMS, AlgorithmInfo, SortStep

__all__ = [
    "ALGORITHMS",
    "AlgorithmInfo",
    "ManualClock",
    "PlaybackController",
    "PlaybackState",
    "PlaybackStatus",
    "SORTERS",
    "Scheduler",
    "SonificationMapper",
    "SortStep",
    "VisualizerSession",
    "bubble_sort",
    "generate_random_array",
    "generate_trace",
    "heap_sort",
    "insertion_sort",
    "is_sorted_trace",
    "merge_sort",
    "quick_sort",
    "selection_sort",
    "shuffle_array",
    "value_to_frequency",
]
