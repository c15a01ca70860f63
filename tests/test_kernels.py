import itertools

import pytest

from mdview.extents import Extents, dextents
from mdview.fill import fill_random
from mdview.kernels import copy_2d, raw_copy, stencil_3d, stencil_bytes_processed
from mdview.mdspan import MDSpan


class _StridedMapping:
    """A strided mapping with arbitrary strides, for layouts other than row-major."""

    def __init__(self, extents, strides):
        self.extents = extents
        self._strides = tuple(strides)

    def __call__(self, *indices):
        return sum(i * s for i, s in zip(indices, self._strides))

    def stride(self, r):
        return self._strides[r]

    def required_span_size(self):
        return 1 + sum((e - 1) * s for e, s in zip(self.extents, self._strides))

    def is_unique(self):
        return all(self._strides)

    def is_exhaustive(self):
        return False

    def is_strided(self):
        return True


def _filled(*shape):
    span = MDSpan([0] * (1 if not shape else __import_prod(shape)), *shape)
    fill_random(span)
    return span


def __import_prod(shape):
    total = 1
    for e in shape:
        total *= e
    return total


def test_copy_2d_layout_right_matches_every_element():
    src = _filled(10, 12)
    dest = MDSpan([0] * 120, 10, 12)
    copy_2d(src, dest)
    assert dest.data_handle == src.data_handle
    for index in itertools.product(range(10), range(12)):
        assert dest[index] == src[index]


def test_copy_2d_into_transposed_layout():
    src = _filled(4, 5)
    left = _StridedMapping(dextents(4, 5), (1, 4))
    dest = MDSpan([0] * 20, left)
    copy_2d(src, dest)
    for i, j in itertools.product(range(4), range(5)):
        assert dest[i, j] == src[i, j]
        assert dest.data_handle[i + 4 * j] == src[i, j]


def test_copy_2d_from_broadcast_rows():
    row = [3, 1, 4, 1, 5]
    src = MDSpan(row, _StridedMapping(dextents(3, 5), (0, 1)))
    dest = MDSpan([0] * 15, 3, 5)
    copy_2d(src, dest)
    assert dest.data_handle == row * 3


def test_copy_2d_from_broadcast_columns():
    column = [7, 8, 9]
    src = MDSpan(column, _StridedMapping(dextents(3, 4), (1, 0)))
    dest = MDSpan([0] * 12, 3, 4)
    copy_2d(src, dest)
    for i in range(3):
        assert [dest[i, j] for j in range(4)] == [column[i]] * 4


def test_copy_2d_with_static_extents():
    src = MDSpan(list(range(6)), static_extents=(2, 3))
    dest = MDSpan([0] * 6, 3, static_extents=(2, None))
    copy_2d(src, dest)
    assert dest.data_handle == list(range(6))


def test_copy_2d_rejects_mismatched_extents():
    src = _filled(3, 4)
    dest = MDSpan([0] * 12, 4, 3)
    with pytest.raises(ValueError):
        copy_2d(src, dest)


def test_copy_2d_rejects_wrong_rank():
    src = _filled(12)
    dest = MDSpan([0] * 12, 3, 4)
    with pytest.raises(ValueError):
        copy_2d(src, dest)


def test_raw_copy_copies_prefix():
    src = list(range(10))
    dest = [None] * 12
    raw_copy(src, dest)
    assert dest[:10] == src
    assert dest[10:] == [None, None]


def test_raw_copy_round_trip_from_filled_view():
    span = _filled(100)
    dest = [0] * 100
    raw_copy(span.data_handle, dest)
    assert dest == span.data_handle


def test_raw_copy_rejects_short_destination():
    with pytest.raises(ValueError):
        raw_copy([1, 2, 3], [0, 0])


def test_stencil_of_constant_field_counts_box_points():
    shape = (5, 6, 7)
    total = 5 * 6 * 7
    source = MDSpan([1] * total, *shape)
    out = MDSpan([-1] * total, *shape)
    stencil_3d(source, out)
    for i, j, k in itertools.product(*(range(e) for e in shape)):
        interior = all(1 <= x < e - 1 for x, e in zip((i, j, k), shape))
        assert out[i, j, k] == (27 if interior else -1)


def test_stencil_delta_zero_copies_source():
    source = _filled(3, 4, 5)
    out = MDSpan([0] * 60, 3, 4, 5)
    stencil_3d(source, out, 0)
    assert out.data_handle == source.data_handle


def test_stencil_is_linear_in_source():
    shape = (6, 6, 6)
    source = _filled(*shape)
    doubled = MDSpan([2 * v for v in source.data_handle], *shape)
    out = MDSpan([0] * 216, *shape)
    out_doubled = MDSpan([0] * 216, *shape)
    stencil_3d(source, out)
    stencil_3d(doubled, out_doubled)
    assert out_doubled.data_handle == [2 * v for v in out.data_handle]


def test_stencil_same_result_for_both_layouts():
    shape = (4, 5, 6)
    right_src = _filled(*shape)
    left_mapping = _StridedMapping(dextents(*shape), (1, 4, 20))
    left_src = MDSpan([0] * 120, left_mapping)
    copy_values = itertools.product(*(range(e) for e in shape))
    for index in copy_values:
        left_src[index] = right_src[index]
    right_out = MDSpan([0] * 120, *shape)
    left_out = MDSpan([0] * 120, _StridedMapping(dextents(*shape), (1, 4, 20)))
    stencil_3d(right_src, right_out)
    stencil_3d(left_src, left_out)
    for index in itertools.product(*(range(e) for e in shape)):
        assert left_out[index] == right_out[index]


def test_stencil_too_small_leaves_output_untouched():
    source = MDSpan([1] * 8, 2, 2, 2)
    out = MDSpan([5] * 8, 2, 2, 2)
    stencil_3d(source, out)
    assert out.data_handle == [5] * 8


def test_stencil_rejects_mismatched_extents():
    with pytest.raises(ValueError):
        stencil_3d(_filled(3, 3, 3), MDSpan([0] * 36, 3, 3, 4))


def test_stencil_rejects_wrong_rank():
    with pytest.raises(ValueError):
        stencil_3d(_filled(9, 3), MDSpan([0] * 27, 9, 3))


def test_stencil_rejects_negative_delta():
    with pytest.raises(ValueError):
        stencil_3d(_filled(3, 3, 3), MDSpan([0] * 27, 3, 3, 3), -1)


def test_bytes_processed_without_delta_is_whole_space():
    assert stencil_bytes_processed((2, 3, 4), 0, 1) == 24


def test_bytes_processed_scales_with_item_size():
    one = stencil_bytes_processed((80, 80, 80), 1, 1)
    assert stencil_bytes_processed((80, 80, 80), 1, 4) == 4 * one
    assert stencil_bytes_processed((80, 80, 80)) == 4 * one


def test_bytes_processed_accepts_extents():
    assert stencil_bytes_processed(Extents((80, None, 80), 80)) == stencil_bytes_processed(
        (80, 80, 80)
    )


def test_bytes_processed_rejects_wrong_rank():
    with pytest.raises(ValueError):
        stencil_bytes_processed((80, 80))


def test_bytes_processed_rejects_negative_delta():
    with pytest.raises(ValueError):
        stencil_bytes_processed((8, 8, 8), -1)