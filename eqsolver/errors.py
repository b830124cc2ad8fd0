"""Exception types raised by the exact equation solver."""


class EqSolverError(Exception):
    """Base class for every error raised by :mod:`eqsolver`."""


class FractionOverflow(EqSolverError, ArithmeticError):
    """An exact intermediate result left the fixed-width fraction range."""

    def __init__(self, operation: str, value: int, limit: str):
        self.operation = operation
        self.value = value
        self.limit = limit
        super().__init__(f"{operation}: {value} exceeds the {limit} range")


class CoefficientIndexError(EqSolverError, IndexError):
    """A row/column coordinate fell outside the augmented matrix."""

    def __init__(self, row: int, column: int, eq_count: int):
        self.row = row
        self.column = column
        self.eq_count = eq_count
        super().__init__(
            f"Coordinate ({row}, {column}) is outside the "
            f"{eq_count} x {eq_count + 1} augmented matrix."
        )
