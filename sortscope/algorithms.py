"""
Step-trace generators for the six sorting algorithms.

Every algorithm is a generator over a private working buffer. It mutates
`arr` in place and yields (type, indices, pivot) on every elementary
operation. `_trace` drives the generator and snapshots the buffer into a
SortStep per event, then appends the terminal `sorted` step.
"""

from types import MappingProxyType

from .steps import COMPARE, MERGE, PIVOT, SWAP, SortStep

# ============================================================
# ===================== SORTING ALGORITHMS ===================
# ============================================================

def _bubble(arr):
    n = len(arr)
    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            yield COMPARE, (j, j+1), None
            if arr[j] > arr[j+1]:
                arr[j], arr[j+1] = arr[j+1], arr[j]; swapped = True
                yield SWAP, (j, j+1), None
        if not swapped:
            break


def _insertion(arr):
    for i in range(1, len(arr)):
        key = arr[i]; j = i - 1
        yield COMPARE, (i,), None
        while j >= 0 and arr[j] > key:
            yield COMPARE, (j, j+1), None
            arr[j+1] = arr[j]
            # a shift is a single write but is tagged as a swap
            yield SWAP, (j, j+1), None
            j -= 1
        arr[j+1] = key


def _selection(arr):
    n = len(arr)
    for i in range(n - 1):
        mi = i
        for j in range(i+1, n):
            yield COMPARE, (mi, j), None
            if arr[j] < arr[mi]: mi = j
        if mi != i:
            arr[i], arr[mi] = arr[mi], arr[i]
            yield SWAP, (i, mi), None


def _merge(arr):
    def _m(lo, mid, hi):
        L = arr[lo:mid+1]; R = arr[mid+1:hi+1]
        i = j = 0; k = lo
        while i < len(L) and j < len(R):
            yield COMPARE, (lo+i, mid+1+j), None
            if L[i] <= R[j]: arr[k] = L[i]; i += 1
            else:            arr[k] = R[j]; j += 1
            yield MERGE, (k,), None
            k += 1
        while i < len(L): arr[k] = L[i]; yield MERGE, (k,), None; i += 1; k += 1
        while j < len(R): arr[k] = R[j]; yield MERGE, (k,), None; j += 1; k += 1

    def _ms(lo, hi):
        if lo < hi:
            mid = (lo + hi) // 2
            yield from _ms(lo, mid); yield from _ms(mid+1, hi)
            yield from _m(lo, mid, hi)

    yield from _ms(0, len(arr) - 1)


def _quick(arr):
    def _partition(lo, hi):
        pivot = arr[hi]
        yield PIVOT, (hi,), hi
        i = lo - 1
        for j in range(lo, hi):
            yield COMPARE, (j, hi), hi
            if arr[j] < pivot:
                i += 1
                arr[i], arr[j] = arr[j], arr[i]
                yield SWAP, (i, j), hi
        arr[i+1], arr[hi] = arr[hi], arr[i+1]
        yield SWAP, (i+1, hi), i+1
        return i + 1

    def _q(lo, hi):
        if lo < hi:
            p = yield from _partition(lo, hi)
            yield from _q(lo, p - 1); yield from _q(p + 1, hi)

    yield from _q(0, len(arr) - 1)


def _heap(arr):
    def hfy(n, i):
        lg, l, r = i, 2*i + 1, 2*i + 2
        if l < n:
            yield COMPARE, (l, lg), None
            if arr[l] > arr[lg]: lg = l
        if r < n:
            yield COMPARE, (r, lg), None
            if arr[r] > arr[lg]: lg = r
        if lg != i:
            arr[i], arr[lg] = arr[lg], arr[i]
            yield SWAP, (i, lg), None
            yield from hfy(n, lg)

    n = len(arr)
    for i in range(n//2 - 1, -1, -1): yield from hfy(n, i)
    for i in range(n - 1, 0, -1):
        arr[0], arr[i] = arr[i], arr[0]
        yield SWAP, (0, i), None
        yield from hfy(i, 0)


# ============================================================
# ========================= TRACES ===========================
# ============================================================

def _trace(gen_fn, seq):
    arr = list(seq)
    steps = [SortStep(tuple(arr), kind, indices, pivot)
             for kind, indices, pivot in gen_fn(arr)]
    steps.append(SortStep(tuple(arr), COMPARE, (), sorted=True))
    return steps


def bubble_sort(seq):
    return _trace(_bubble, seq)


def insertion_sort(seq):
    return _trace(_insertion, seq)


def selection_sort(seq):
    return _trace(_selection, seq)


def merge_sort(seq):
    return _trace(_merge, seq)


def quick_sort(seq):
    return _trace(_quick, seq)


def heap_sort(seq):
    return _trace(_heap, seq)


SORTERS = MappingProxyType({
    "bubble":    bubble_sort,
    "insertion": insertion_sort,
    "selection": selection_sort,
    "merge":     merge_sort,
    "quick":     quick_sort,
    "heap":      heap_sort,
})


def generate_trace(algorithm, seq):
    if algorithm not in SORTERS:
        raise KeyError(f"Unknown algorithm: {algorithm}")
    return SORTERS[algorithm](seq)


def is_sorted_trace(steps) -> bool:
    """True when only the last step is flagged sorted and its array is non-decreasing."""
    if not steps or not steps[-1].sorted:
        return False
    if any(s.sorted for s in steps[:-1]):
        return False
    a = steps[-1].array
    return all(a[i] <= a[i+1] for i in range(len(a) - 1))
