"""EqSolver — exact Gauss-Jordan solving of square linear systems."""

from eqsolver.engine import EquationSolver, SolveStatus
from eqsolver.errors import CoefficientIndexError, EqSolverError, FractionOverflow
from eqsolver.fraction import Fraction
from eqsolver.loader import load_matrix, parse_system, solve_text

__all__ = [
    "CoefficientIndexError",
    "EqSolverError",
    "EquationSolver",
    "Fraction",
    "FractionOverflow",
    "SolveStatus",
    "load_matrix",
    "parse_system",
    "solve_text",
]
