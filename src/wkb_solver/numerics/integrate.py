"""
Sampling and chunked trapezoidal integration.

Every integral in the solver (WKB phase integrals, Bohr-Sommerfeld
actions, renormalization areas) goes through this module so that all
of them share the same composite trapezoid rule.

Parallel layout:
    The sample sequence is split into contiguous chunks. Each chunk's
    local trapezoid sum is computed independently on a thread pool, the
    partial sums are reduced in index order, and the panels that join
    neighbouring chunks are added afterwards, sequentially. The result
    is therefore independent of the number of workers.
"""

import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, List, NamedTuple, Optional, Sequence, Union

from wkb_solver.core.constants import TRAPEZE_PER_THREAD, MAX_WORKERS


class SampledPoint(NamedTuple):
    """A single sample (position, value)."""
    x: float
    y: Union[float, complex]


@dataclass(frozen=True)
class SampledPoints:
    """
    Ordered samples of a function on a grid.

    Stored as two aligned arrays; iterating yields SampledPoint tuples.
    Positions must be sorted ascending or descending (integration
    direction follows the order).
    """
    x: NDArray
    y: NDArray

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[SampledPoint]:
        for xi, yi in zip(self.x, self.y):
            yield SampledPoint(xi, yi)

    def __getitem__(self, index: int) -> SampledPoint:
        return SampledPoint(self.x[index], self.y[index])

    def map_values(self, func: Callable) -> 'SampledPoints':
        """Return a copy with func applied to the values (e.g. |y|^2)."""
        return SampledPoints(x=self.x, y=func(self.y))


def parallel_map(
    func: Callable,
    items: Sequence,
    max_workers: Optional[int] = MAX_WORKERS
) -> List:
    """
    Map func over items on a thread pool, preserving item order.

    A single item (or none) is handled inline.
    """
    if len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))


def chunk_slices(n: int, chunk_size: int) -> List[slice]:
    """Contiguous slices of length chunk_size covering range(n)."""
    chunk_size = max(int(chunk_size), 1)
    return [slice(start, min(start + chunk_size, n)) for start in range(0, n, chunk_size)]


def index_to_range(
    i: float,
    in_lo: float,
    in_hi: float,
    out_lo: float,
    out_hi: float
) -> float:
    """Map i linearly from [in_lo, in_hi] onto [out_lo, out_hi]."""
    return (i - in_lo) / (in_hi - in_lo) * (out_hi - out_lo) + out_lo


def evaluate_function_between(
    f: Callable,
    a: float,
    b: float,
    n: int,
    chunk_size: int = TRAPEZE_PER_THREAD,
    max_workers: Optional[int] = MAX_WORKERS
) -> SampledPoints:
    """
    Sample f at n evenly spaced points from a to b (both included).

    f must accept numpy arrays. Chunks of the grid are evaluated in
    parallel.

    Args:
        f: Vectorised function to sample.
        a: First position.
        b: Last position.
        n: Number of samples.
        chunk_size: Points per parallel chunk.
        max_workers: Thread pool size.

    Returns:
        SampledPoints ordered from a to b.
    """
    x = np.linspace(a, b, n)
    if n == 0:
        return SampledPoints(x=x, y=np.zeros(0))

    chunks = parallel_map(
        lambda s: np.asarray(f(x[s])) * np.ones(s.stop - s.start),
        chunk_slices(n, chunk_size),
        max_workers,
    )
    return SampledPoints(x=x, y=np.concatenate(chunks))


def _trapezoid_sum(x: NDArray, y: NDArray) -> Union[float, complex]:
    """Composite trapezoid over consecutive samples of one chunk."""
    if len(x) < 2:
        return 0.0
    return np.sum(np.diff(x) * (y[1:] + y[:-1])) / 2.0


def _as_arrays(points) -> tuple:
    if isinstance(points, SampledPoints):
        return np.asarray(points.x), np.asarray(points.y)
    points = list(points)
    if not points:
        return np.zeros(0), np.zeros(0)
    x = np.array([p[0] for p in points], dtype=float)
    y = np.array([p[1] for p in points])
    return x, y


def integrate(
    points,
    chunk_size: int = TRAPEZE_PER_THREAD,
    max_workers: Optional[int] = MAX_WORKERS
) -> Union[float, complex]:
    """
    Definite integral of sampled points by the composite trapezoid rule.

    Args:
        points: SampledPoints or a sequence of (x, y) pairs, ordered by x.
        chunk_size: Points per parallel chunk.
        max_workers: Thread pool size.

    Returns:
        The integral (complex when the samples are complex); 0 for fewer
        than two points.
    """
    x, y = _as_arrays(points)
    n = len(x)
    if n < 2:
        return 0.0

    slices = chunk_slices(n, chunk_size)
    partial = parallel_map(lambda s: _trapezoid_sum(x[s], y[s]), slices, max_workers)

    total = 0.0
    for value in partial:
        total += value

    # Panels joining neighbouring chunks, added once each, in order
    for s in slices[:-1]:
        i = s.stop - 1
        total += (x[i + 1] - x[i]) * (y[i + 1] + y[i]) / 2.0

    return total


def cumulative_integrate(
    points,
    chunk_size: int = TRAPEZE_PER_THREAD,
    max_workers: Optional[int] = MAX_WORKERS
) -> NDArray:
    """
    Running trapezoid integral from the first sample to every sample.

    Same chunk layout as integrate(): chunk-local running sums are
    computed in parallel, then each chunk is offset by the carry of all
    previous chunks plus the joining panel.

    Returns:
        Array of len(points) values; the first entry is 0.
    """
    x, y = _as_arrays(points)
    n = len(x)
    if n == 0:
        return np.zeros(0)

    def local_running_sum(s: slice) -> NDArray:
        xs, ys = x[s], y[s]
        running = np.zeros(len(xs), dtype=np.result_type(ys, float))
        if len(xs) > 1:
            running[1:] = np.cumsum(np.diff(xs) * (ys[1:] + ys[:-1]) / 2.0)
        return running

    slices = chunk_slices(n, chunk_size)
    locals_ = parallel_map(local_running_sum, slices, max_workers)

    result = np.empty(n, dtype=np.result_type(*locals_))
    carry = 0.0
    for k, (s, running) in enumerate(zip(slices, locals_)):
        if k > 0:
            i = s.start - 1
            carry = carry + (x[i + 1] - x[i]) * (y[i + 1] + y[i]) / 2.0
        result[s] = running + carry
        carry = result[s.stop - 1]
    return result
