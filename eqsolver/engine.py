"""Exact Gauss-Jordan solver for square systems of linear equations.

The solver keeps two augmented N x (N+1) matrices of fractions:

* ``original`` is written by the setters and never touched by elimination;
  it is used to rebuild the working copy and to verify the result.
* ``working`` is replaced by a fresh copy of ``original`` at the start of
  every :meth:`EquationSolver.solve_system` call and reduced in place.

Pivoting is positional (first nonzero entry below the current row).  Since
the arithmetic is exact, "no solution" and "infinite solutions" are decided
with certainty; the only failure mode of the arithmetic itself is a value
leaving the 32-bit fraction range, which aborts the solve with
``SolveStatus.OVERFLOW``.
"""

from __future__ import annotations

import enum
import logging
from itertools import chain
from typing import Callable, Optional

from eqsolver import fraction
from eqsolver.config import load_settings
from eqsolver.errors import CoefficientIndexError, FractionOverflow
from eqsolver.fraction import Fraction, ZERO
from eqsolver.matrix import FractionMatrix

logger = logging.getLogger(__name__)

MAX_EQUATIONS = 65535
COEFFICIENT_MIN = -32768
COEFFICIENT_MAX = 32767


class SolveStatus(enum.IntEnum):
    SOLVED = 1
    NO_SOLUTIONS = 2
    INFINITE_SOLUTIONS = 3
    MEMORY_ERROR = 4
    OVERFLOW = 5


def _check_value(name: str, value: int) -> None:
    if not COEFFICIENT_MIN <= value <= COEFFICIENT_MAX:
        raise ValueError(
            f"{name} must be between {COEFFICIENT_MIN} and {COEFFICIENT_MAX}, "
            f"got {value}."
        )


class EquationSolver:
    """Solve ``N`` linear equations in ``N`` unknowns with exact fractions.

    Coordinates on the public surface are 1-based; column ``N + 1`` holds the
    right-hand side of each equation.  Out-of-range coordinates are ignored
    (getters return zero) unless *strict_bounds* is set, in which case they
    raise :class:`~eqsolver.errors.CoefficientIndexError`.

    An instance is not reentrant: callers sharing one across threads must
    serialise access themselves.
    """

    def __init__(self, strict_bounds: bool = False):
        self.strict_bounds = strict_bounds
        self.eq_count = 0
        self.original: Optional[FractionMatrix] = None
        self.working: Optional[FractionMatrix] = None
        self.solution: list[Fraction] = []
        self.overflow = False

    @classmethod
    def from_settings(cls, settings: Optional[dict] = None) -> "EquationSolver":
        if settings is None:
            settings = load_settings()
        return cls(strict_bounds=settings.get("strict_bounds", False))

    # ── Storage lifecycle ───────────────────────────────────────────────

    def set_system_eq_count(self, count: int) -> bool:
        """Allocate storage for *count* simultaneous equations.

        Any previous system is released first.  Returns ``False`` when the
        storage could not be allocated; the instance must then be reset with
        :meth:`cleanup` before further use.
        """
        if not 0 <= count <= MAX_EQUATIONS:
            raise ValueError(
                f"Equation count must be between 0 and {MAX_EQUATIONS}, got {count}."
            )
        self.cleanup()
        if count == 0:
            return True
        try:
            self.original = FractionMatrix(count)
            self.working = FractionMatrix(count)
            self.solution = [ZERO] * count
        except MemoryError:
            logger.error("Could not allocate storage for %d equations", count)
            self.original = self.working = None
            self.solution = []
            return False
        self.eq_count = count
        logger.debug("Allocated %d x %d augmented matrix", count, count + 1)
        return True

    def cleanup(self) -> None:
        """Release all storage and reset the solver; safe to call repeatedly."""
        self.original = None
        self.working = None
        self.solution = []
        self.eq_count = 0
        self.overflow = False

    # ── Bounds handling ─────────────────────────────────────────────────

    def _cell_in_bounds(self, row: int, column: int) -> bool:
        inside = 1 <= row <= self.eq_count and 1 <= column <= self.eq_count + 1
        if not inside and self.strict_bounds:
            raise CoefficientIndexError(row, column, self.eq_count)
        return inside

    def _row_in_bounds(self, *rows: int) -> bool:
        inside = all(1 <= row <= self.eq_count for row in rows)
        if not inside and self.strict_bounds:
            bad = next(row for row in rows if not 1 <= row <= self.eq_count)
            raise CoefficientIndexError(bad, 1, self.eq_count)
        return inside

    # ── Setters & getters ───────────────────────────────────────────────

    def _store(self, row: int, column: int, value: Fraction) -> None:
        self.original.set(row - 1, column - 1, value)
        self.working.set(row - 1, column - 1, value)

    def set_coefficient(self, row: int, column: int, value: int) -> None:
        """Store the integer *value* at (*row*, *column*) in both matrices."""
        _check_value("Coefficient", value)
        if not self._cell_in_bounds(row, column):
            return
        self._store(row, column, fraction.from_int(value))

    def set_coefficient_fraction(self, row: int, column: int,
                                 numerator: int, denominator: int) -> None:
        """Store ``numerator/denominator`` at (*row*, *column*).

        A zero denominator stores zero.  The fraction is kept as given, not
        reduced.
        """
        _check_value("Numerator", numerator)
        _check_value("Denominator", denominator)
        if not self._cell_in_bounds(row, column):
            return
        self._store(row, column, fraction.from_parts(numerator, denominator))

    def get_original_matrix_coefficient(self, row: int, column: int) -> int:
        """Return the signed numerator stored at (*row*, *column*), or 0."""
        if not self._cell_in_bounds(row, column):
            return 0
        return self.original.get(row - 1, column - 1).signed_numerator

    def get_original_matrix_coefficient_fraction(self, row: int,
                                                 column: int) -> tuple[int, int]:
        if not self._cell_in_bounds(row, column):
            return 0, 0
        cell = self.original.get(row - 1, column - 1)
        return cell.signed_numerator, cell.denominator

    def get_altered_matrix_coefficient(self, row: int,
                                       column: int) -> Optional[Fraction]:
        if not self._cell_in_bounds(row, column):
            return None
        return self.working.get(row - 1, column - 1)

    def solution_as_rationals(self) -> list:
        return [fraction.to_rational(value) for value in self.solution]

    # ── Row operations on the working matrix ────────────────────────────

    def _run_row_op(self, operation: Callable[[], None]) -> bool:
        try:
            operation()
        except FractionOverflow as e:
            self.overflow = True
            logger.warning("Row operation aborted: %s", e)
            return False
        return True

    def swap_rows(self, row1: int, row2: int) -> bool:
        if not self._row_in_bounds(row1, row2):
            return False
        self.working.swap_rows(row1 - 1, row2 - 1)
        return True

    def multiply_matrix_row(self, row: int, multiplier: Fraction) -> bool:
        """Multiply a working row by *multiplier*.

        Returns ``False`` when the row is out of range or the operation hit
        an overflow (which also raises :attr:`overflow`).
        """
        if not self._row_in_bounds(row):
            return False
        return self._run_row_op(
            lambda: self.working.multiply_row(row - 1, multiplier))

    def divide_matrix_row(self, row: int, divisor: Fraction) -> bool:
        if not self._row_in_bounds(row):
            return False
        return self._run_row_op(
            lambda: self.working.divide_row(row - 1, divisor))

    def add_matrix_rows(self, row: int, row_to_add: int) -> bool:
        if not self._row_in_bounds(row, row_to_add):
            return False
        return self._run_row_op(
            lambda: self.working.add_rows(row - 1, row_to_add - 1))

    # ── Solving ─────────────────────────────────────────────────────────

    def solve_system(self) -> SolveStatus:
        """Reduce a fresh copy of the original matrix and verify the result.

        On ``SOLVED`` the unknowns are available in :attr:`solution`; on any
        other outcome the solution vector is left as it was.
        """
        self.overflow = False
        n = self.eq_count
        if n == 0:
            logger.debug("Empty system, trivially solved")
            return SolveStatus.SOLVED

        try:
            working = self.original.copy()
        except MemoryError:
            logger.error("Could not allocate the working matrix")
            return SolveStatus.MEMORY_ERROR
        self.working = working

        logger.debug("Solving %d x %d system", n, n)
        try:
            status = self._eliminate(working)
            if status is None:
                status = self._verify(working)
        except FractionOverflow as e:
            self.overflow = True
            logger.warning("Solve aborted on overflow: %s", e)
            return SolveStatus.OVERFLOW

        if status is SolveStatus.SOLVED:
            self.solution = [working.get(i, n) for i in range(n)]
        logger.debug("Solve finished: %s", status.name)
        return status

    def _eliminate(self, matrix: FractionMatrix) -> Optional[SolveStatus]:
        """Gauss-Jordan reduction; returns an outcome only when a column
        runs out of pivots, ``None`` when every column was processed."""
        n = matrix.eq_count
        row = column = 0
        while column < n:
            if fraction.is_zero(matrix.get(row, column)):
                candidate = self._find_pivot(matrix, row, column)
                if candidate is None:
                    logger.debug("Column %d has no pivot at or below row %d",
                                 column + 1, row + 1)
                    column += 1
                    if column == n:
                        return self._classify_without_pivot(matrix, row)
                    continue
                logger.debug("Swapping rows %d and %d", row + 1, candidate + 1)
                matrix.swap_rows(row, candidate)

            pivot = matrix.get(row, column)
            if not fraction.is_one(pivot):
                matrix.divide_row(row, pivot)

            for target in chain(range(row), range(row + 1, n)):
                multiplier = matrix.get(target, column)
                if fraction.is_zero(multiplier):
                    continue
                matrix.subtract_scaled_row(target, row, multiplier)

            row += 1
            column += 1
        return None

    @staticmethod
    def _find_pivot(matrix: FractionMatrix, row: int,
                    column: int) -> Optional[int]:
        for candidate in range(row + 1, matrix.eq_count):
            if not fraction.is_zero(matrix.get(candidate, column)):
                return candidate
        return None

    @staticmethod
    def _classify_without_pivot(matrix: FractionMatrix, row: int) -> SolveStatus:
        n = matrix.eq_count
        if fraction.is_zero(matrix.get(row, n)):
            return SolveStatus.INFINITE_SOLUTIONS
        if any(matrix.is_zero_row(i) for i in range(n)):
            return SolveStatus.INFINITE_SOLUTIONS
        return SolveStatus.NO_SOLUTIONS

    def _verify(self, matrix: FractionMatrix) -> SolveStatus:
        """Substitute the reduced right-hand side back into every original
        equation and require an exact match."""
        n = matrix.eq_count
        if fraction.is_zero(matrix.get(n - 1, n - 1)):
            if fraction.is_zero(matrix.get(n - 1, n)):
                return SolveStatus.INFINITE_SOLUTIONS
            return SolveStatus.NO_SOLUTIONS

        for i in range(n):
            total = ZERO
            for j in range(n):
                term = fraction.multiply(self.original.get(i, j), matrix.get(j, n))
                total = fraction.add(total, term)
            expected = fraction.reduce(self.original.get(i, n))
            if total != expected:
                logger.debug("Equation %d fails verification: %s != %s",
                             i + 1, total, expected)
                return SolveStatus.NO_SOLUTIONS
        return SolveStatus.SOLVED
