"""Augmented N x (N+1) matrix of exact fractions.

Rows are stored as independent lists so that swapping two rows only
exchanges the references.  Indices are 0-based here; the solver's public
surface translates from the 1-based coordinates callers use.
"""

from __future__ import annotations

from eqsolver import fraction
from eqsolver.fraction import Fraction, ZERO


class FractionMatrix:
    """Owned grid of :class:`~eqsolver.fraction.Fraction` cells.

    Row operations apply the fraction arithmetic column by column, left to
    right.  The first :class:`~eqsolver.errors.FractionOverflow` propagates
    straight out of the loop, leaving the remaining columns untouched.
    """

    def __init__(self, eq_count: int):
        self.eq_count = eq_count
        self.rows: list[list[Fraction]] = [
            [ZERO] * (eq_count + 1) for _ in range(eq_count)
        ]

    @property
    def column_count(self) -> int:
        return self.eq_count + 1

    def get(self, row: int, column: int) -> Fraction:
        return self.rows[row][column]

    def set(self, row: int, column: int, value: Fraction) -> None:
        self.rows[row][column] = value

    def copy(self) -> "FractionMatrix":
        clone = FractionMatrix.__new__(FractionMatrix)
        clone.eq_count = self.eq_count
        clone.rows = [list(row) for row in self.rows]
        return clone

    def is_zero_row(self, row: int) -> bool:
        """True when every cell of *row*, right-hand side included, is zero."""
        return all(fraction.is_zero(cell) for cell in self.rows[row])

    def to_strings(self) -> list[list[str]]:
        return [[str(cell) for cell in row] for row in self.rows]

    # ── Row operations ──────────────────────────────────────────────────

    def swap_rows(self, row1: int, row2: int) -> None:
        self.rows[row1], self.rows[row2] = self.rows[row2], self.rows[row1]

    def multiply_row(self, row: int, factor: Fraction) -> None:
        cells = self.rows[row]
        for column in range(self.column_count):
            cells[column] = fraction.multiply(cells[column], factor)

    def divide_row(self, row: int, divisor: Fraction) -> None:
        cells = self.rows[row]
        for column in range(self.column_count):
            cells[column] = fraction.divide(cells[column], divisor)

    def add_rows(self, row: int, row_to_add: int) -> None:
        """Add *row_to_add* into *row*, cell by cell."""
        cells = self.rows[row]
        source = self.rows[row_to_add]
        for column in range(self.column_count):
            cells[column] = fraction.add(cells[column], source[column])

    def subtract_scaled_row(self, row: int, source_row: int,
                            factor: Fraction) -> None:
        """Replace *row* with ``row - factor * source_row``."""
        cells = self.rows[row]
        source = self.rows[source_row]
        for column in range(self.column_count):
            if fraction.is_zero(source[column]):
                continue
            scaled = fraction.multiply(source[column], factor)
            cells[column] = fraction.subtract(cells[column], scaled)
