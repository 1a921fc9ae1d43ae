import logging
from collections import Counter

from .algorithms import generate_trace
from .arrays import generate_random_array, shuffle_array
from .config import DEFAULT_ALGORITHM, DEFAULT_SIZE, SIZE_MAX, SIZE_MIN, clamp
from .steps import ALGORITHMS, COMPARE, MERGE, PIVOT, SWAP

logger = logging.getLogger(__name__)


class VisualizerSession:
    """
    Holds the input array and the selected algorithm, and keeps the
    controller loaded with the matching trace. Every change goes through
    controller.load(), which stops playback first.
    """

    def __init__(self, controller, size=DEFAULT_SIZE, algorithm=DEFAULT_ALGORITHM, rng=None):
        if algorithm not in ALGORITHMS:
            raise KeyError(f"Unknown algorithm: {algorithm}")
        self.controller = controller
        self.algorithm  = algorithm
        self.rng        = rng
        self.size       = int(clamp(int(size), SIZE_MIN, SIZE_MAX))
        self.array      = generate_random_array(self.size, rng=self.rng)
        self._rebuild()

    @property
    def info(self):
        return ALGORITHMS[self.algorithm]

    def new_array(self, size=None):
        if size is not None:
            self.size = int(clamp(int(size), SIZE_MIN, SIZE_MAX))
        self.array = generate_random_array(self.size, rng=self.rng)
        self._rebuild()

    def shuffle(self):
        self.array = shuffle_array(self.array, rng=self.rng)
        self._rebuild()

    def select_algorithm(self, algorithm):
        if algorithm not in ALGORITHMS:
            raise KeyError(f"Unknown algorithm: {algorithm}")
        self.algorithm = algorithm
        self._rebuild()

    def stats(self):
        """Step counts for the current trace, computed once per rebuild."""
        return dict(self._stats)

    def _rebuild(self):
        steps = generate_trace(self.algorithm, self.array)
        self.controller.load(steps)
        counts = Counter(s.type for s in steps if not s.sorted)
        self._stats = {
            "comparisons": counts[COMPARE],
            "swaps":       counts[SWAP],
            "pivots":      counts[PIVOT],
            "merges":      counts[MERGE],
            "steps":       len(steps),
        }
        logger.debug("%s on %d values: %d steps", self.info.name, len(self.array), len(steps))
