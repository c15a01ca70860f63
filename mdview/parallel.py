"""Multi-threaded matrix-vector product and box stencil over multidimensional views."""

from __future__ import annotations

import itertools
import operator
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from mdview.layout_right import LayoutRightMapping

DEFAULT_DELTA = 1
"""Half-width of the stencil box used when none is given."""


def _shape(span: Any) -> tuple[int, ...]:
    return tuple(span.extents)


def _require_rank(span: Any, rank: int, name: str) -> tuple[int, ...]:
    shape = _shape(span)
    if len(shape) != rank:
        raise ValueError(f"{name} must have rank {rank}, got rank {len(shape)}")
    return shape


def _run_parallel(task: Callable[[int], None], count: int, workers: int | None) -> None:
    """Run ``task(i)`` for every ``i`` in ``range(count)`` on a thread pool."""
    if workers is not None and workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    with ThreadPoolExecutor(max_workers=workers) as pool:
        # Consuming the results re-raises any exception from a task.
        for _ in pool.map(task, range(count)):
            pass


def first_touch(span: Any) -> None:
    """Set every element of ``span`` to zero, visiting indices in row-major order."""
    for index in itertools.product(*(range(e) for e in span.extents)):
        span[index] = 0


def matvec(
    a: Any,
    x: Any,
    y: Any,
    repeat: int = 1,
    workers: int | None = None,
) -> None:
    """Compute ``y = repeat * (a @ x)`` with the rows shared out among threads.

    The first pass assigns ``a @ x`` to ``y``; each further pass adds it
    again.  ``a`` is a rank-2 view, ``x`` and ``y`` rank-1 views of matching
    extents.
    """
    rows, cols = _require_rank(a, 2, "matrix")
    (x_len,) = _require_rank(x, 1, "x")
    (y_len,) = _require_rank(y, 1, "y")
    if x_len != cols:
        raise ValueError(f"x has extent {x_len}, matrix has {cols} columns")
    if y_len != rows:
        raise ValueError(f"y has extent {y_len}, matrix has {rows} rows")
    if repeat < 1:
        raise ValueError(f"repeat must be at least 1, got {repeat}")

    def row_product(i: int) -> Any:
        return sum(a[i, j] * x[j] for j in range(cols))

    def assign(i: int) -> None:
        y[i] = row_product(i)

    def accumulate(i: int) -> None:
        y[i] = y[i] + row_product(i)

    _run_parallel(assign, rows, workers)
    for _ in range(repeat - 1):
        _run_parallel(accumulate, rows, workers)


def parallel_stencil_3d(
    source: Any,
    out: Any,
    delta: int = DEFAULT_DELTA,
    workers: int | None = None,
) -> None:
    """Box-sum stencil over a rank-3 view, with first-index planes shared among threads.

    Every index at least ``delta`` away from each boundary gets, in ``out``,
    the sum of ``source`` over the cube of side ``2 * delta + 1`` centred on
    it.  Points nearer a boundary are left as they were.
    """
    if delta < 0:
        raise ValueError(f"delta must not be negative, got {delta}")
    shape = _require_rank(source, 3, "source")
    out_shape = _require_rank(out, 3, "output")
    if out_shape != shape:
        raise ValueError(f"extents differ: source {shape}, output {out_shape}")

    nx, ny, nz = shape
    planes = range(delta, nx - delta)

    def plane(n: int) -> None:
        i = planes[n]
        for j, k in itertools.product(range(delta, ny - delta), range(delta, nz - delta)):
            box = itertools.product(
                range(i - delta, i + delta + 1),
                range(j - delta, j + delta + 1),
                range(k - delta, k + delta + 1),
            )
            out[i, j, k] = sum(source[index] for index in box)

    _run_parallel(plane, len(planes), workers)


class _Row(Sequence):
    """A contiguous run of elements in flat storage, readable and writable by index."""

    __slots__ = ("_data", "_start", "_length")

    def __init__(self, data: Any, start: int, length: int) -> None:
        self._data = data
        self._start = start
        self._length = length

    def _offset(self, k: Any) -> int:
        k = operator.index(k)
        if not 0 <= k < self._length:
            raise IndexError(f"index {k} out of range for row of length {self._length}")
        return self._start + k

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, k: Any) -> Any:
        return self._data[self._offset(k)]

    def __setitem__(self, k: Any, value: Any) -> None:
        self._data[self._offset(k)] = value

    def __repr__(self) -> str:
        return f"_Row(start={self._start}, length={self._length})"


def pointer_table_3d(span: Any) -> list[list[_Row]]:
    """Nested table where ``table[i][j][k]`` reaches element ``(i, j, k)`` of ``span``.

    Each ``table[i][j]`` is a writable row over the span's storage starting
    at ``(i, j, 0)``.  Only row-major views are accepted, since their last
    dimension is contiguous.
    """
    if not isinstance(span.mapping, LayoutRightMapping):
        raise TypeError("a pointer table can only be built from a layout_right view")
    nx, ny, nz = _require_rank(span, 3, "span")
    data = span.data_handle
    if nx == 0 or ny == 0:
        return [[] for _ in range(nx)]
    s0, s1 = span.stride(0), span.stride(1)
    return [[_Row(data, i * s0 + j * s1, nz) for j in range(ny)] for i in range(nx)]