"""Non-owning multidimensional views over flat, indexable storage."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from mdview.extents import DYNAMIC_EXTENT, Extents
from mdview.layout_right import LayoutRightMapping


class DefaultAccessor:
    """Reads and writes elements of a flat sequence by offset."""

    __slots__ = ()

    def access(self, data: Any, offset: int) -> Any:
        """Return the element stored at ``offset``."""
        return data[offset]

    def store(self, data: Any, offset: int, value: Any) -> None:
        """Write ``value`` at ``offset``."""
        data[offset] = value

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _is_mapping(obj: object) -> bool:
    return isinstance(getattr(obj, "extents", None), Extents) and callable(obj)


class MDSpan:
    """A view that maps multidimensional indices onto ``data`` through a layout.

    The shape is given in one of these ways after ``data``:

    * nothing, for a rank-0 view (or one with ``static_extents`` fully fixed);
    * a run of sizes, or a single sequence of sizes: one per dynamic rank of
      ``static_extents`` or one per rank (all ranks are dynamic by default);
    * an ``Extents``;
    * a ready-made layout mapping.

    ``layout`` builds the mapping from extents and defaults to row-major.
    ``accessor`` defaults to ``DefaultAccessor``.
    """

    __slots__ = ("_data", "_mapping", "_accessor")

    def __init__(
        self,
        data: Any,
        *shape: Any,
        static_extents: Iterable[int | None] | None = None,
        layout: Callable[[Extents], Any] = LayoutRightMapping,
        accessor: Any = None,
    ) -> None:
        self._data = data
        self._accessor = DefaultAccessor() if accessor is None else accessor

        if len(shape) == 1 and _is_mapping(shape[0]):
            if static_extents is not None:
                Extents(static_extents, shape[0].extents)
            self._mapping = shape[0]
            return

        if len(shape) == 1 and isinstance(shape[0], Extents):
            exts = shape[0]
            if static_extents is not None:
                exts = Extents(static_extents, exts)
        else:
            if len(shape) == 1 and isinstance(shape[0], Sequence):
                sizes = tuple(shape[0])
            else:
                sizes = shape
            if static_extents is None:
                pattern: tuple[int | None, ...] = (DYNAMIC_EXTENT,) * len(sizes)
            else:
                pattern = tuple(static_extents)
            exts = Extents(pattern, *sizes)
        self._mapping = layout(exts)

    # -- observers ---------------------------------------------------------

    @property
    def data_handle(self) -> Any:
        """The underlying storage."""
        return self._data

    @property
    def mapping(self) -> Any:
        """The layout mapping from indices to offsets."""
        return self._mapping

    @property
    def accessor(self) -> Any:
        """The accessor used to read and write elements."""
        return self._accessor

    @property
    def extents(self) -> Extents:
        """The index space of the view."""
        return self._mapping.extents

    def rank(self) -> int:
        return self.extents.rank()

    def rank_dynamic(self) -> int:
        return self.extents.rank_dynamic()

    def static_extent(self, r: int) -> int | None:
        return self.extents.static_extent(r)

    def extent(self, r: int) -> int:
        return self.extents.extent(r)

    def size(self) -> int:
        """Number of elements in the index space."""
        return math.prod(self.extents)

    def empty(self) -> bool:
        """True when some dimension has extent zero."""
        return self.rank() > 0 and any(e == 0 for e in self.extents)

    def stride(self, r: int) -> int:
        return self._mapping.stride(r)

    def is_unique(self) -> bool:
        return self._mapping.is_unique()

    def is_exhaustive(self) -> bool:
        return self._mapping.is_exhaustive()

    def is_strided(self) -> bool:
        return self._mapping.is_strided()

    def is_always_unique(self) -> bool:
        return self._mapping.is_always_unique()

    def is_always_exhaustive(self) -> bool:
        return self._mapping.is_always_exhaustive()

    def is_always_strided(self) -> bool:
        return self._mapping.is_always_strided()

    # -- element access ----------------------------------------------------

    @staticmethod
    def _normalize(indices: Any) -> tuple[int, ...]:
        if isinstance(indices, tuple):
            return indices
        if isinstance(indices, Sequence):
            return tuple(indices)
        return (operator.index(indices),)

    def __getitem__(self, indices: Any) -> Any:
        offset = self._mapping(*self._normalize(indices))
        return self._accessor.access(self._data, offset)

    def __setitem__(self, indices: Any, value: Any) -> None:
        offset = self._mapping(*self._normalize(indices))
        self._accessor.store(self._data, offset, value)

    def __call__(self, *args: int) -> Any:
        return self._accessor.access(self._data, self._mapping(*args))

    def swap(self, other: MDSpan) -> None:
        """Exchange storage, mapping and accessor with ``other``."""
        self._data, other._data = other._data, self._data
        self._mapping, other._mapping = other._mapping, self._mapping
        self._accessor, other._accessor = other._accessor, self._accessor

    def __repr__(self) -> str:
        return f"MDSpan({self._mapping!r}, accessor={self._accessor!r})"