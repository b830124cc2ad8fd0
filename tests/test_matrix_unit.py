import pytest

from eqsolver import fraction
from eqsolver.errors import FractionOverflow
from eqsolver.fraction import Fraction, ZERO
from eqsolver.matrix import FractionMatrix


def _matrix(rows) -> FractionMatrix:
    m = FractionMatrix(len(rows))
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            m.set(i, j, fraction.from_int(value))
    return m


def test_new_matrix_is_all_canonical_zero() -> None:
    m = FractionMatrix(3)
    assert m.column_count == 4
    assert all(cell == ZERO for row in m.rows for cell in row)


def test_swap_rows_exchanges_references_only() -> None:
    m = _matrix([[1, 2, 3], [4, 5, 6]])
    first, second = m.rows[0], m.rows[1]
    m.swap_rows(0, 1)
    assert m.rows[0] is second
    assert m.rows[1] is first


def test_copy_is_independent() -> None:
    m = _matrix([[1, 2, 3], [4, 5, 6]])
    clone = m.copy()
    clone.multiply_row(0, fraction.from_int(10))
    assert m.to_strings() == [["1", "2", "3"], ["4", "5", "6"]]
    assert clone.to_strings()[0] == ["10", "20", "30"]


def test_divide_and_add_rows() -> None:
    m = _matrix([[2, 4, 6], [1, -1, 1]])
    m.divide_row(0, fraction.from_int(2))
    assert m.to_strings()[0] == ["1", "2", "3"]
    m.add_rows(1, 0)
    assert m.to_strings()[1] == ["2", "1", "4"]


def test_subtract_scaled_row_clears_column() -> None:
    m = _matrix([[1, 1, 3], [2, 2, 10]])
    m.subtract_scaled_row(1, 0, m.get(1, 0))
    assert m.to_strings()[1] == ["0", "0", "4"]
    assert not m.is_zero_row(1)


def test_is_zero_row_includes_right_hand_side() -> None:
    m = _matrix([[0, 0, 0], [0, 0, 5]])
    assert m.is_zero_row(0)
    assert not m.is_zero_row(1)


def test_row_operation_stops_at_first_overflow() -> None:
    m = FractionMatrix(2)
    m.rows[0] = [Fraction(2, 1), Fraction(65536, 1), Fraction(3, 1)]
    with pytest.raises(FractionOverflow):
        m.multiply_row(0, Fraction(65536, 1))
    # Columns before the overflow were updated, the rest left untouched.
    assert m.get(0, 0) == Fraction(131072, 1)
    assert m.get(0, 1) == Fraction(65536, 1)
    assert m.get(0, 2) == Fraction(3, 1)
