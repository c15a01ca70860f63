"""Element-wise copy and box-stencil kernels over multidimensional views."""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterable, MutableSequence, Sequence
from typing import Any

DEFAULT_DELTA = 1
"""Half-width of the stencil box used when none is given."""

DEFAULT_ITEM_SIZE = 4
"""Size in bytes of one element when none is given (a 32-bit integer)."""


def _shape(span: Any) -> tuple[int, ...]:
    return tuple(span.extents)


def _require_rank(span: Any, rank: int, name: str) -> tuple[int, ...]:
    shape = _shape(span)
    if len(shape) != rank:
        raise ValueError(f"{name} must have rank {rank}, got rank {len(shape)}")
    return shape


def copy_2d(src: Any, dest: Any) -> None:
    """Copy every element of the rank-2 view ``src`` into ``dest``.

    Both views are walked by index, so their layouts may differ; ``dest``
    must have the same extents as ``src``.
    """
    shape = _require_rank(src, 2, "source")
    dest_shape = _require_rank(dest, 2, "destination")
    if dest_shape != shape:
        raise ValueError(f"extents differ: source {shape}, destination {dest_shape}")
    for i, j in itertools.product(range(shape[0]), range(shape[1])):
        dest[i, j] = src[i, j]


def raw_copy(src: Sequence[Any], dest: MutableSequence[Any]) -> None:
    """Copy the flat sequence ``src`` into the start of ``dest``."""
    if len(dest) < len(src):
        raise ValueError(
            f"destination holds {len(dest)} elements, source has {len(src)}"
        )
    for offset, value in enumerate(src):
        dest[offset] = value


def stencil_3d(source: Any, out: Any, delta: int = DEFAULT_DELTA) -> None:
    """Write into ``out`` the sum over each interior point's box in ``source``.

    For every index at least ``delta`` away from each boundary, ``out`` gets
    the sum of ``source`` over the cube of side ``2 * delta + 1`` centred on
    it.  Points nearer a boundary are left as they were.
    """
    if delta < 0:
        raise ValueError(f"delta must not be negative, got {delta}")
    shape = _require_rank(source, 3, "source")
    out_shape = _require_rank(out, 3, "output")
    if out_shape != shape:
        raise ValueError(f"extents differ: source {shape}, output {out_shape}")

    interior = (range(delta, extent - delta) for extent in shape)
    for i, j, k in itertools.product(*interior):
        box = itertools.product(
            range(i - delta, i + delta + 1),
            range(j - delta, j + delta + 1),
            range(k - delta, k + delta + 1),
        )
        out[i, j, k] = sum(source[index] for index in box)


def stencil_bytes_processed(
    extents: Iterable[int],
    delta: int = DEFAULT_DELTA,
    item_size: int = DEFAULT_ITEM_SIZE,
) -> int:
    """Bytes read by one pass of ``stencil_3d`` over a space of ``extents``.

    Counted as ``(e0 - delta) * (e1 - delta) * (e2 - delta)`` points, each
    reading a box of ``(2 * delta + 1) ** 3`` elements of ``item_size`` bytes.
    """
    sizes = tuple(extents)
    if len(sizes) != 3:
        raise ValueError(f"expected 3 extents, got {len(sizes)}")
    if delta < 0:
        raise ValueError(f"delta must not be negative, got {delta}")
    inner_elements = math.prod(extent - delta for extent in sizes)
    stencil_points = (2 * delta + 1) ** 3
    return inner_elements * stencil_points * item_size