"""Row-major layout mapping: the last index varies fastest."""

from __future__ import annotations

import math
import operator

from mdview.extents import Extents


class LayoutRightMapping:
    """Maps a multidimensional index to an offset in row-major order.

    Built from an ``Extents``, from another ``LayoutRightMapping``, or from
    any strided mapping (one with ``extents`` and ``stride(r)``) whose
    strides are already row-major.
    """

    __slots__ = ("_extents",)

    def __init__(self, source: object = None) -> None:
        if source is None:
            self._extents = Extents()
        elif isinstance(source, Extents):
            self._extents = source
        elif isinstance(source, LayoutRightMapping):
            self._extents = source.extents
        elif isinstance(getattr(source, "extents", None), Extents) and callable(
            getattr(source, "stride", None)
        ):
            self._extents = source.extents
            for r in reversed(range(self._extents.rank())):
                if operator.index(source.stride(r)) != self.stride(r):
                    raise ValueError(
                        "Assigning layout_stride to layout_right with invalid strides."
                    )
        else:
            raise TypeError(f"cannot build a layout_right mapping from {source!r}")

    @property
    def extents(self) -> Extents:
        """The index space this mapping covers."""
        return self._extents

    def required_span_size(self) -> int:
        """Number of elements the underlying storage must hold."""
        return math.prod(self._extents)

    def __call__(self, *args: int) -> int:
        rank = self._extents.rank()
        if len(args) != rank:
            raise TypeError(f"expected {rank} indices, got {len(args)}")
        offset = 0
        for r, (index, extent) in enumerate(zip(args, self._extents)):
            i = operator.index(index)
            if not 0 <= i < extent:
                raise IndexError(f"index {i} out of range for extent {extent} at rank {r}")
            offset = offset * extent + i
        return offset

    def stride(self, r: int) -> int:
        """Distance in storage between neighbouring indices along rank ``r``."""
        rank = self._extents.rank()
        if not 0 <= r < rank:
            raise IndexError(f"rank index {r} out of range for rank {rank}")
        return math.prod(tuple(self._extents)[r + 1:])

    def is_unique(self) -> bool:
        return True

    def is_exhaustive(self) -> bool:
        return True

    def is_strided(self) -> bool:
        return True

    def is_always_unique(self) -> bool:
        return True

    def is_always_exhaustive(self) -> bool:
        return True

    def is_always_strided(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayoutRightMapping):
            return NotImplemented
        return self._extents == other._extents

    def __hash__(self) -> int:
        return hash((LayoutRightMapping, self._extents))

    def __repr__(self) -> str:
        return f"LayoutRightMapping({self._extents!r})"