import numpy as np
import pytest

from ndpipe import ShapeMismatchError
from ndpipe.core.shapes import (
    advance,
    allocate,
    check_shape,
    grain_at_depth,
    iter_positions,
    product,
    read,
    write,
    zero_position,
)


def test_advance_visits_row_major_and_exhausts_after_last_cell():
    shape = (2, 3)
    position = zero_position(shape)
    visited = [tuple(position)]
    results = []
    for _ in range(6):
        results.append(advance(position, shape))
        visited.append(tuple(position))
    assert visited[:6] == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]
    assert results == [True, True, True, True, True, False]
    assert position == [0, 0]


def test_advance_carries_across_several_axes():
    position = [0, 2, 1]
    assert advance(position, (2, 3, 2)) is True
    assert position == [1, 0, 0]


def test_iter_positions_matches_ndindex():
    shape = (2, 1, 3)
    assert list(iter_positions(shape)) == list(np.ndindex(*shape))
    assert list(iter_positions((0, 4))) == []


def test_product_of_shapes():
    assert product(()) == 1
    assert product((5,)) == 5
    assert product((2, 3, 4)) == 24
    assert product((3, 0)) == 0


def test_check_shape_accepts_numpy_integers():
    assert check_shape((np.int64(2), 3)) == (2, 3)


@pytest.mark.parametrize("shape", [(2.5,), (1, -1), (True,), ("3",)])
def test_check_shape_rejects_invalid_extents(shape):
    with pytest.raises(ShapeMismatchError, match="Invalid shape"):
        check_shape(shape)


def test_read_and_write_nested_lists():
    nested = [[1, 2], [3, 4]]
    assert read(nested, [1, 0]) == 3
    write(nested, [0, 1], 9)
    assert nested == [[1, 9], [3, 4]]


def test_read_and_write_ndarray():
    arr = np.arange(6).reshape(2, 3)
    assert read(arr, [1, 2]) == 5
    write(arr, [0, 0], 42)
    assert arr[0, 0] == 42
    np.testing.assert_array_equal(read(arr, [1]), [3, 4, 5])


def test_allocate_scalar_grain():
    out = allocate(np.uint32, (2, 3))
    assert out.shape == (2, 3)
    assert out.dtype == np.uint32
    assert not out.any()


def test_allocate_sub_array_grain_folds_into_trailing_axes():
    out = allocate(np.dtype((np.float32, (4,))), (3,))
    assert out.shape == (3, 4)
    assert out.dtype == np.float32


def test_allocate_object_grain():
    out = allocate(object, (2,))
    assert out.dtype == np.dtype(object)
    assert out.tolist() == [0, 0]


def test_grain_at_depth():
    assert grain_at_depth(np.int16, (4, 5), 2) == np.dtype(np.int16)
    grain = grain_at_depth(np.int16, (4, 5, 6), 1)
    assert grain.shape == (5, 6)
    assert grain.base == np.dtype(np.int16)
