"""
Tests for Matrix construction, element access and row iteration.
"""

import pytest
import numpy as np

from stridemat import (
    Matrix, DType, OwnershipMode, allocate, from_data,
    IndexOutOfBoundsError, InvalidArgumentError,
    ShapeMismatchError, TypeMismatchError,
)


class TestMatrixCreation:
    """Test Matrix factory methods."""

    def test_zeros(self):
        """Allocated matrix is zero-filled and packed."""
        m = Matrix.zeros(2, 2)
        assert m.shape == (2, 2)
        assert m.stride == 2
        assert m.dtype == DType.float64
        assert m.window.tolist() == [0.0, 0.0, 0.0, 0.0]
        assert m.owns_data

    def test_zeros_every_element(self):
        """get(i, j) == 0 for every valid index."""
        m = allocate(3, 4)
        for i in range(3):
            for j in range(4):
                assert m.get(i, j) == 0.0

    def test_zeros_complex(self):
        """Complex allocation uses complex zero."""
        m = Matrix.zeros(2, 3, dtype='complex128')
        assert m.dtype == DType.complex128
        assert m.get(1, 2) == 0j
        assert isinstance(m.get(1, 2), complex)

    def test_zeros_empty(self):
        """Zero extents are allowed."""
        m = Matrix.zeros(0, 5)
        assert m.shape == (0, 5)
        assert m.size == 0
        assert m.to_list() == []

    def test_zeros_negative(self):
        """Negative extents are rejected."""
        with pytest.raises(InvalidArgumentError):
            Matrix.zeros(-1, 2)
        with pytest.raises(InvalidArgumentError):
            Matrix.zeros(2, -3)

    def test_from_data(self):
        """get(i, j) == data[i * cols + j]."""
        data = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        m = from_data(2, 3, data)
        assert m.shape == (2, 3)
        assert m.stride == 3
        for i in range(2):
            for j in range(3):
                assert m.get(i, j) == data[i * 3 + j]

    def test_from_data_length_mismatch(self):
        """Wrong data length fails with a shape mismatch."""
        with pytest.raises(ShapeMismatchError):
            Matrix.from_data(2, 2, [1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            Matrix.from_data(2, 2, [1.0] * 5)

    def test_from_data_wraps_numpy(self):
        """A float64 array is wrapped without a copy."""
        buf = np.arange(6, dtype=np.float64)
        m = Matrix.from_data(2, 3, buf)
        assert m.ownership is OwnershipMode.BORROWED
        m.set(1, 0, -1.0)
        assert buf[3] == -1.0
        buf[5] = 42.0
        assert m.get(1, 2) == 42.0

    def test_from_data_converts_ints(self):
        """Integer input is converted to float64 storage."""
        buf = np.arange(4)
        m = Matrix.from_data(2, 2, buf)
        assert m.dtype == DType.float64
        assert m.owns_data
        assert m.get(1, 1) == 3.0

    def test_from_data_infers_complex(self):
        """Complex values give a complex matrix."""
        m = Matrix.from_data(1, 2, [1.0, 2j])
        assert m.dtype == DType.complex128
        assert m.get(0, 1) == 2j

    def test_from_data_complex_into_real(self):
        """Complex data cannot be stored as float64."""
        with pytest.raises(TypeMismatchError):
            Matrix.from_data(1, 2, [1.0, 2j], dtype='float64')

    def test_from_data_rejects_2d(self):
        """Only flat data is accepted."""
        with pytest.raises(InvalidArgumentError):
            Matrix.from_data(2, 2, np.zeros((2, 2)))

    def test_from_data_rejects_nested_list(self):
        """Nested sequences fail as bad arguments, not as a storage error."""
        with pytest.raises(InvalidArgumentError):
            Matrix.from_data(2, 2, [[1.0, 2.0], [3.0, 4.0]])

    def test_from_data_borrows_strided_array(self):
        """A strided 1-D array is wrapped as is; writes reach the caller."""
        base = np.arange(8, dtype=np.float64)
        m = Matrix.from_data(2, 2, base[::2])
        assert m.ownership is OwnershipMode.BORROWED
        assert m.to_list() == [[0.0, 2.0], [4.0, 6.0]]
        m.set(1, 1, -1.0)
        assert base[6] == -1.0
        assert base[7] == 7.0

    def test_from_rows(self):
        """Nested rows build a packed matrix."""
        m = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
        assert m.shape == (2, 3)
        assert m.to_list() == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]

    def test_from_rows_ragged(self):
        """Ragged rows are a shape mismatch."""
        with pytest.raises(ShapeMismatchError):
            Matrix.from_rows([[1, 2], [3]])

    def test_wrap_strided(self, strided_operand):
        """Explicit stride skips the elements between rows."""
        assert strided_operand.shape == (2, 2)
        assert strided_operand.stride == 3
        assert strided_operand.to_list() == [[4.0, 4.0], [7.0, 7.0]]
        assert not strided_operand.is_contiguous

    def test_wrap_strided_too_short(self):
        """Data must reach the last element of the last row."""
        with pytest.raises(ShapeMismatchError):
            Matrix.wrap_strided(2, 2, 3, [1.0, 2.0, 3.0, 4.0])

    def test_wrap_strided_stride_below_cols(self):
        """Stride smaller than cols is invalid."""
        with pytest.raises(InvalidArgumentError):
            Matrix.wrap_strided(2, 3, 2, [0.0] * 6)


class TestElementAccess:
    """Test get/set and bounds checking."""

    def test_get_set(self):
        """set then get returns the value."""
        m = Matrix.zeros(20, 20)
        assert m.get(3, 7) == 0
        m.set(3, 7, 100)
        assert m.get(3, 7) == 100

    def test_item_syntax(self):
        """m[i, j] delegates to get/set."""
        m = Matrix.zeros(2, 2)
        m[1, 0] = 2.5
        assert m[1, 0] == 2.5

    def test_item_requires_tuple(self):
        """Single index is rejected."""
        m = Matrix.zeros(2, 2)
        with pytest.raises(TypeError):
            m[0]

    @pytest.mark.parametrize("i,j", [(2, 0), (0, 3), (5, 5), (-1, 0), (0, -1)])
    def test_out_of_bounds(self, i, j):
        """Negative or too-large indices fail eagerly."""
        m = Matrix.zeros(2, 3)
        with pytest.raises(IndexOutOfBoundsError):
            m.get(i, j)
        with pytest.raises(IndexOutOfBoundsError):
            m.set(i, j, 1.0)

    def test_out_of_bounds_is_index_error(self):
        """Bounds errors are also IndexError."""
        m = Matrix.zeros(1, 1)
        with pytest.raises(IndexError):
            m.get(1, 0)

    def test_set_complex_into_real(self):
        """Complex value cannot be stored in a real matrix."""
        m = Matrix.zeros(1, 1)
        with pytest.raises(TypeMismatchError):
            m.set(0, 0, 1 + 2j)

    def test_set_real_into_complex(self):
        """Real values are fine in a complex matrix."""
        m = Matrix.zeros(1, 1, dtype='complex128')
        m.set(0, 0, 3.0)
        assert m.get(0, 0) == 3 + 0j


class TestRowIteration:
    """Test iter_rows, get_row and reductions."""

    def test_row_count_and_order(self, grid_matrix):
        """Exactly rows row-vectors, ascending."""
        rows = list(grid_matrix.iter_rows())
        assert len(rows) == 4
        assert [row[0] for row in rows] == [0.0, 10.0, 20.0, 30.0]

    def test_restartable(self, grid_matrix):
        """Each call starts a fresh pass."""
        first = [row.tolist() for row in grid_matrix.iter_rows()]
        second = [row.tolist() for row in grid_matrix.iter_rows()]
        assert first == second

    def test_early_stop(self, grid_matrix):
        """Stopping early leaves the matrix unchanged."""
        it = grid_matrix.iter_rows()
        assert next(it).tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
        del it
        assert len(list(grid_matrix)) == 4

    def test_view_rows_stay_within_width(self):
        """Rows of a narrow view have length l and no neighbour values."""
        m = Matrix.zeros(10, 10)
        m.set(3, 8, 99.0)
        m.set(4, 4, 99.0)
        view = m.slice(3, 2, 5, 3)
        rows = list(view.iter_rows())
        assert len(rows) == 2
        for row in rows:
            assert row.tolist() == [0.0, 0.0, 0.0]

    def test_view_rows_values(self, grid_matrix):
        """Rows of a view are its logical rows."""
        view = grid_matrix.slice(1, 2, 3, 2)
        assert [row.tolist() for row in view] == [[13.0, 14.0], [23.0, 24.0]]

    def test_get_row(self, grid_matrix):
        """get_row returns one logical row."""
        assert grid_matrix.get_row(2).tolist() == [20.0, 21.0, 22.0, 23.0, 24.0]
        with pytest.raises(IndexOutOfBoundsError):
            grid_matrix.get_row(4)

    def test_len(self, grid_matrix):
        assert len(grid_matrix) == 4

    def test_sum(self):
        """Sum of all logical elements."""
        m = Matrix.from_data(2, 2, [1.0, 1.0, 1.0, 1.0])
        assert m.sum() == 4.0

    def test_sum_of_view(self, grid_matrix):
        """Sum ignores elements between a view's rows."""
        assert grid_matrix.slice(0, 2, 0, 2).sum() == 0.0 + 1.0 + 10.0 + 11.0

    def test_sum_empty(self):
        assert Matrix.zeros(0, 0).sum() == 0.0

    def test_to_numpy(self, grid_matrix):
        """Packed 2-D copy."""
        arr = grid_matrix.slice(1, 2, 1, 2).to_numpy()
        assert arr.shape == (2, 2)
        np.testing.assert_array_equal(arr, [[11.0, 12.0], [21.0, 22.0]])

    def test_repr_truncates(self):
        """Repr lists at most repr_max_rows rows."""
        text = repr(Matrix.zeros(10, 2))
        assert "10x2" in text
        assert "more rows" in text
