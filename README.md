# mdview

`mdview` gives multidimensional indexing over flat Python sequences such as
lists. A shape (`Extents`) and a layout mapping turn an index tuple into an
offset; a view (`MDSpan`) or an owning array (`MDArray`) uses that offset to
read and write elements.

## Modules

- `mdview.extents`
  - `Extents(static_extents, *values)` describes an index space. Each entry of `static_extents` is a fixed size or `DYNAMIC_EXTENT` (`None`).
  - The run-time values may be given for the dynamic ranks only, for every rank, as one sequence, or as another `Extents` of the same rank. If no values are given, the dynamic extents are zero.
  - A value that contradicts a fixed extent raises `ValueError`.
  - It has `rank()`, `rank_dynamic()`, `static_extent(r)`, `extent(r)` and `size()`, and it iterates over its extents.
  - `dextents(*sizes)` builds an `Extents` whose every rank is dynamic.
  - `FullExtent` (with the instance `full_extent`) is a marker value for "the whole of one dimension".
- `mdview.layout_right`
  - `LayoutRightMapping` is the row-major mapping: the last index varies fastest.
  - It is built from an `Extents`, from another `LayoutRightMapping`, or from any strided mapping whose strides are already row-major. Otherwise it raises `ValueError`.
  - Calling it with one index per rank gives the offset. An index out of range raises `IndexError`.
  - It has `stride(r)` and `required_span_size()`, and the `is_unique` / `is_exhaustive` / `is_strided` queries and their `is_always_*` forms, all true.
- `mdview.mdspan`
  - `MDSpan(data, *shape, static_extents=None, layout=LayoutRightMapping, accessor=None)` is a non-owning view. It is indexed by `view[i, j]`, `view((i, j))` or `view(i, j)`, and it can be assigned to with `view[i, j] = v`.
  - The shape is given as sizes, one sequence of sizes, an `Extents`, or a ready-made mapping.
  - `DefaultAccessor` reads and writes `data[offset]`.
  - A view also has `extents`, `mapping`, `accessor`, `data_handle`, `size()`, `empty()`, `stride(r)` and `swap(other)`.
- `mdview.mdarray`
  - `MDArray(*shape, container=None, copy=True, static_extents=None, layout=LayoutRightMapping, fill_value=0)` owns its storage.
  - Without a container it allocates a list of `fill_value`. A given container is copied unless `copy=False`. A container shorter than the mapping needs raises `ValueError`.
  - `size()` is the container's length.
  - `to_mdspan()` gives a view onto the same storage.
- `mdview.fill`
  - `fill_random(span, seed=1234)` writes seeded random integers from 0 to 127 in row-major index order.
- `mdview.kernels`
  - `copy_2d(src, dest)` copies between two rank-2 views of equal extents, whatever their layouts.
  - `raw_copy(src, dest)` copies a flat sequence into the start of another.
  - `stencil_3d(source, out, delta=1)` writes into each interior point of `out` the sum of `source` over the surrounding cube of side `2 * delta + 1`. Points nearer the boundary than `delta` are left unchanged.
  - `stencil_bytes_processed(extents, delta=1, item_size=4)` gives the byte count of one stencil pass.
- `mdview.parallel`
  - `matvec(a, x, y, repeat=1, workers=None)` sets `y` to `a @ x`, then adds `a @ x` again for each further repeat. The rows are shared out over a thread pool.
  - `parallel_stencil_3d(source, out, delta=1, workers=None)` is the stencil with its first-index planes shared out over threads.
  - `first_touch(span)` zeroes a view.
  - `pointer_table_3d(span)` builds nested rows so that `table[i][j][k]` reads and writes element `(i, j, k)` of a row-major rank-3 view.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from mdview.extents import dextents
from mdview.layout_right import LayoutRightMapping
from mdview.mdspan import MDSpan
from mdview.mdarray import MDArray
from mdview.fill import fill_random

mapping = LayoutRightMapping(dextents(16, 32))
mapping.stride(0)              # 32
mapping.stride(1)              # 1
mapping.required_span_size()   # 512

data = list(range(6))
view = MDSpan(data, 2, 3)      # both ranks dynamic
view[1, 2]                     # 5
view[0, 1] = 42
data[1]                        # 42

fixed = MDSpan(data, 3, static_extents=(2, None))
fixed.rank_dynamic()           # 1

array = MDArray(2, 3)
fill_random(array.to_mdspan(), 1234)
array.size()                   # 6
```

## What it does not do

- The only layout provided is the row-major `LayoutRightMapping`. There is no column-major or arbitrary-stride mapping, although `layout=` accepts any callable that builds a mapping from an `Extents`.
- There is no slicing into sub-views. `full_extent` is only a marker value.
- The kernels are plain Python loops. Nothing here times them or runs them as benchmarks, and no command-line tool is installed.