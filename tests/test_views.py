import numpy as np
import pytest

from densemat import BoundsViolationError, InvalidShapeError, Matrix

grid = np.arange(1.0, 17.0).reshape(4, 4)


def fresh() -> Matrix:
    return Matrix.from_numpy(grid)


def test_column_view_aliases():
    m = fresh()
    col = m.column(2)

    assert col.shape == (4, 1)
    assert col.is_view and col.aliases(m)
    assert col.to_array().tolist() == [3, 7, 11, 15]

    col.set(1, 0, -1)
    assert m.get(1, 2) == -1, "Write through the column did not reach the parent."


def test_row_view_aliases():
    m = fresh()
    row = m.row(1)

    assert row.shape == (1, 4)
    assert row.to_array().tolist() == [5, 6, 7, 8]

    row.fill(0)
    assert m.to_2d_array()[1] == [0, 0, 0, 0]
    assert m.to_2d_array()[0] == [1, 2, 3, 4], "Fill spilled out of the row."


def test_sub_matrix_view():
    m = fresh()
    block = m.sub_matrix(1, 1, 2, 3)

    assert block.to_2d_array() == [[6, 7, 8], [10, 11, 12]]
    assert block.to_array().tolist() == [6, 10, 7, 11, 8, 12], "Skip cells were copied."

    block.set_each(lambda v, r, c: 0)
    assert m.to_2d_array() == [
        [1, 2, 3, 4],
        [5, 0, 0, 0],
        [9, 0, 0, 0],
        [13, 14, 15, 16],
    ]


def test_full_sub_matrix_aliases_parent():
    m = fresh()
    whole = m.sub_matrix(0, 0, m.rows, m.cols)

    whole.set(3, 3, 100)
    assert m.get(3, 3) == 100

    m.set(0, 0, -5)
    assert whole.get(0, 0) == -5


def test_views_of_views_share_the_root_buffer():
    m = fresh()
    block = m.sub_matrix(1, 1, 3, 3)
    inner = block.sub_matrix(1, 1, 2, 2)

    assert inner.aliases(m)
    assert inner.to_2d_array() == [[11, 12], [15, 16]]
    assert inner.row(1).to_array().tolist() == [15, 16]

    inner.column(0).fill(0)
    assert m.get(2, 2) == 0 and m.get(3, 2) == 0


def test_explicit_view_offsets_from_source():
    m = fresh()
    block = m.sub_matrix(1, 0, 3, 4)
    v = Matrix.view(2, 2, block, stride=4, offset=4)

    assert v.to_2d_array() == [[6, 7], [10, 11]]


def test_view_bounds_are_checked():
    m = fresh()

    with pytest.raises(BoundsViolationError):
        m.column(4)
    with pytest.raises(BoundsViolationError):
        m.row(-1)
    with pytest.raises(BoundsViolationError):
        m.sub_matrix(2, 2, 3, 1)
    with pytest.raises(BoundsViolationError):
        Matrix.view(4, 4, m, offset=1)


def test_set_diag_on_view_steps_by_parent_stride():
    m = Matrix.zeros(4)
    m.sub_matrix(1, 1, 3, 3).set_diag(lambda v, i: i + 1)

    assert m.to_2d_array() == [
        [0, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 0, 2, 0],
        [0, 0, 0, 3],
    ]


def test_to_array_detaches_view():
    m = fresh()
    values = m.sub_matrix(0, 0, 2, 2).to_array()
    values[0] = 99.0

    assert m.get(0, 0) == 1


def test_set_to_between_overlapping_views():
    m = Matrix.from_rows([[1, 2, 3]])
    m.sub_matrix(0, 1, 1, 2).set_to(m.sub_matrix(0, 0, 1, 2))

    assert list(m) == [1, 1, 2], "Overlapping copy read values it had just written."


def test_transpose_copies():
    m = fresh()
    t = m.transpose()

    assert t.shape == (4, 4)
    assert np.array_equal(t.to_numpy(), grid.T)
    assert not t.aliases(m)

    wide = Matrix.from_rows([[1, 2, 3]])
    assert wide.T.to_2d_array() == [[1], [2], [3]]


def test_double_transpose_is_exact():
    r = Matrix.random(5, 3, seed=1)

    assert r.transpose().transpose().to_2d_array() == r.to_2d_array()


def test_transpose_of_view():
    m = fresh()

    assert m.sub_matrix(0, 1, 2, 3).transpose().to_2d_array() == [[2, 6], [3, 7], [4, 8]]


def test_minor():
    m = fresh()

    for i in range(4):
        for j in range(4):
            expected = np.delete(np.delete(grid, i, axis=0), j, axis=1)
            result = m.minor(i, j)

            assert result.shape == (3, 3)
            assert list(result) == expected.ravel().tolist(), f"Minor ({i}, {j}) is loco."


def test_minor_needs_room():
    with pytest.raises(InvalidShapeError):
        Matrix.owned(1, 3).minor(0, 0)
    with pytest.raises(BoundsViolationError):
        fresh().minor(4, 0)
