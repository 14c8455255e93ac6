import numpy as np

from densemat import Buffer, Matrix


def test_buffer_from_length_is_zeroed():
    buffer = Buffer(4)

    assert len(buffer) == 4
    assert buffer.to_numpy().tolist() == [0.0] * 4


def test_buffer_copies_content():
    source = np.array([1.0, 2.0, 3.0])
    buffer = Buffer(source)
    source[0] = 9.0

    assert buffer.to_numpy().tolist() == [1.0, 2.0, 3.0], "Buffer kept a reference to its source."
    assert Buffer(x * 2 for x in range(3)).to_numpy().tolist() == [0.0, 2.0, 4.0]


def test_cells_share_memory():
    buffer = Buffer(3)
    buffer.cells()[1] = 5.0

    assert buffer.buffer[1] == 5.0


def test_matrices_over_one_buffer():
    buffer = Buffer(np.arange(6.0))
    first = Matrix(2, 3, buffer)
    second = Matrix(3, 2, buffer)

    assert first.aliases(second)
    first.set(1, 0, -1)
    assert second.get(1, 0) == -1, "Both matrices should see the same cells."
