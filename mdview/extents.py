"""Multidimensional index spaces whose extents are fixed ahead of time or given at run time."""

from __future__ import annotations

import math
import operator
from collections.abc import Iterable, Iterator

DYNAMIC_EXTENT = None
"""Marker in a static-extents pattern for an extent supplied at run time."""


class FullExtent:
    """Slice specifier that selects the whole of one dimension."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FullExtent)

    def __hash__(self) -> int:
        return hash(FullExtent)

    def __repr__(self) -> str:
        return "full_extent"


full_extent = FullExtent()


def _as_extent(value: object) -> int:
    try:
        number = operator.index(value)
    except TypeError:
        raise TypeError(f"extent must be an integer, got {value!r}") from None
    if number < 0:
        raise ValueError(f"extent must not be negative, got {number}")
    return number


class Extents:
    """An index space: a static pattern of extents plus the run-time values.

    ``static_extents`` holds one entry per rank, either a fixed size or
    ``DYNAMIC_EXTENT``.  The values may be given for the dynamic ranks only,
    for every rank, as a single sequence, or as another ``Extents`` of the
    same rank.  Without values the dynamic extents are zero.
    """

    __slots__ = ("_static", "_values")

    def __init__(self, static_extents: Iterable[int | None] = (), *values: object) -> None:
        static = tuple(
            DYNAMIC_EXTENT if s is DYNAMIC_EXTENT else _as_extent(s) for s in static_extents
        )
        self._static = static

        if len(values) == 1 and isinstance(values[0], Extents):
            self._values = self._from_other(values[0])
            return
        if len(values) == 1 and isinstance(values[0], Iterable):
            values = tuple(values[0])

        given = tuple(_as_extent(v) for v in values)
        dynamic_count = self.rank_dynamic()

        if not given and dynamic_count:
            given = (0,) * dynamic_count

        if len(given) == dynamic_count:
            supplied = iter(given)
            self._values = tuple(
                next(supplied) if s is DYNAMIC_EXTENT else s for s in static
            )
        elif len(given) == len(static):
            for rank, (s, v) in enumerate(zip(static, given)):
                if s is not DYNAMIC_EXTENT and s != v:
                    raise ValueError(
                        f"extent {v} for rank {rank} does not match static extent {s}"
                    )
            self._values = given
        else:
            raise ValueError(
                f"expected {dynamic_count} or {len(static)} extents, got {len(given)}"
            )

    def _from_other(self, other: Extents) -> tuple[int, ...]:
        if other.rank() != len(self._static):
            raise ValueError(
                f"cannot convert extents of rank {other.rank()} to rank {len(self._static)}"
            )
        values = tuple(other)
        for rank, (s, v) in enumerate(zip(self._static, values)):
            if s is not DYNAMIC_EXTENT and s != v:
                raise ValueError(
                    f"extent {v} for rank {rank} does not match static extent {s}"
                )
        return values

    @property
    def static_extents(self) -> tuple[int | None, ...]:
        """The static pattern, with ``DYNAMIC_EXTENT`` for run-time extents."""
        return self._static

    def rank(self) -> int:
        """Number of dimensions."""
        return len(self._static)

    def rank_dynamic(self) -> int:
        """Number of dimensions whose extent is given at run time."""
        return sum(1 for s in self._static if s is DYNAMIC_EXTENT)

    def static_extent(self, r: int) -> int | None:
        """The static extent of rank ``r``, or ``DYNAMIC_EXTENT``."""
        self._check_rank(r)
        return self._static[r]

    def extent(self, r: int) -> int:
        """The actual extent of rank ``r``."""
        self._check_rank(r)
        return self._values[r]

    def _check_rank(self, r: int) -> None:
        if not 0 <= r < len(self._static):
            raise IndexError(f"rank index {r} out of range for rank {len(self._static)}")

    def size(self) -> int:
        """Number of index tuples in the space."""
        return math.prod(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Extents):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        pattern = ", ".join("dyn" if s is DYNAMIC_EXTENT else str(s) for s in self._static)
        return f"Extents(<{pattern}>, {list(self._values)})"


def dextents(*args: int) -> Extents:
    """Extents whose every dimension is dynamic, with the given sizes."""
    return Extents((DYNAMIC_EXTENT,) * len(args), *args)