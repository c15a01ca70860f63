"""Owning multidimensional arrays: a container laid out through a mapping."""

from __future__ import annotations

import copy as _copy
import operator
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from mdview.extents import DYNAMIC_EXTENT, Extents
from mdview.layout_right import LayoutRightMapping
from mdview.mdspan import MDSpan


def _is_mapping(obj: object) -> bool:
    return isinstance(getattr(obj, "extents", None), Extents) and callable(obj)


def _normalize(indices: Any) -> tuple[int, ...]:
    if isinstance(indices, tuple):
        return indices
    if isinstance(indices, Sequence):
        return tuple(indices)
    return (operator.index(indices),)


class MDArray:
    """A multidimensional array that owns its flat storage.

    The shape is given as for ``MDSpan``: a run of sizes or one sequence of
    sizes (one per dynamic rank of ``static_extents`` or one per rank), an
    ``Extents``, a ready-made layout mapping, or another ``MDArray`` whose
    mapping and contents are taken over.

    Without ``container`` the storage is a list of ``fill_value`` holding
    ``required_span_size()`` elements.  A given container is copied unless
    ``copy`` is false, in which case the array takes it over as it is.  The
    container must hold at least ``required_span_size()`` elements.
    """

    __slots__ = ("_mapping", "_container")

    def __init__(
        self,
        *shape: Any,
        container: Any = None,
        copy: bool = True,
        static_extents: Iterable[int | None] | None = None,
        layout: Callable[[Extents], Any] = LayoutRightMapping,
        fill_value: Any = 0,
    ) -> None:
        if len(shape) == 1 and isinstance(shape[0], MDArray):
            other = shape[0]
            if static_extents is not None:
                Extents(static_extents, other.extents)
            self._mapping = other.mapping
            if container is None:
                container = other.container
        else:
            self._mapping = self._build_mapping(shape, static_extents, layout)

        required = self._mapping.required_span_size()
        if container is None:
            self._container = [fill_value] * required
        else:
            self._container = _copy.copy(container) if copy else container
            if len(self._container) < required:
                raise ValueError(
                    f"container holds {len(self._container)} elements, "
                    f"mapping needs {required}"
                )

    @staticmethod
    def _build_mapping(
        shape: tuple[Any, ...],
        static_extents: Iterable[int | None] | None,
        layout: Callable[[Extents], Any],
    ) -> Any:
        if len(shape) == 1 and _is_mapping(shape[0]):
            if static_extents is not None:
                Extents(static_extents, shape[0].extents)
            return shape[0]
        if len(shape) == 1 and isinstance(shape[0], Extents):
            exts = shape[0]
            if static_extents is not None:
                exts = Extents(static_extents, exts)
            return layout(exts)
        if len(shape) == 1 and isinstance(shape[0], Sequence):
            sizes = tuple(shape[0])
        else:
            sizes = shape
        if static_extents is None:
            pattern: tuple[int | None, ...] = (DYNAMIC_EXTENT,) * len(sizes)
        else:
            pattern = tuple(static_extents)
        return layout(Extents(pattern, *sizes))

    # -- observers ---------------------------------------------------------

    @property
    def container(self) -> Any:
        """The owned storage."""
        return self._container

    @property
    def mapping(self) -> Any:
        """The layout mapping from indices to offsets."""
        return self._mapping

    @property
    def extents(self) -> Extents:
        """The index space of the array."""
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
        """Number of elements the container holds."""
        return len(self._container)

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

    def __getitem__(self, indices: Any) -> Any:
        return self._container[self._mapping(*_normalize(indices))]

    def __setitem__(self, indices: Any, value: Any) -> None:
        self._container[self._mapping(*_normalize(indices))] = value

    def __call__(self, *args: int) -> Any:
        return self._container[self._mapping(*args)]

    def to_mdspan(self) -> MDSpan:
        """A view onto this array's storage with the same mapping."""
        return MDSpan(self._container, self._mapping)

    def __repr__(self) -> str:
        return f"MDArray({self._mapping!r}, size={len(self._container)})"