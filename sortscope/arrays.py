import random

from .config import VALUE_MAX, VALUE_MIN


def generate_random_array(size, min_value=VALUE_MIN, max_value=VALUE_MAX, rng=None):
    """Return `size` integers, each uniform in [min_value, max_value]. Duplicates allowed."""
    rng = rng or random
    if min_value > max_value:
        min_value, max_value = max_value, min_value
    return [rng.randint(min_value, max_value) for _ in range(max(0, int(size)))]


def shuffle_array(seq, rng=None):
    """Fisher-Yates shuffle into a new list; `seq` is left untouched."""
    rng = rng or random
    arr = list(seq)
    for i in range(len(arr) - 1, 0, -1):
        j = rng.randint(0, i)
        arr[i], arr[j] = arr[j], arr[i]
    return arr
