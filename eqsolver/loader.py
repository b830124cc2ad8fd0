"""Feeding coefficients into :class:`~eqsolver.engine.EquationSolver`.

Two sources are supported:

* an N x (N+1) integer array (NumPy array or nested lists) via
  :func:`load_matrix`;
* equation text such as ``"x + y = 3, x - y = 1"`` via :func:`parse_system`
  and :func:`solve_text`.  Text is parsed with SymPy, the way the rest of the
  tooling reads equations, and each coefficient must be an exact rational
  whose numerator and denominator fit the solver's 16-bit input range.
"""

import logging
import re
import time
from datetime import datetime
from typing import Optional

import numpy as np
import sympy
from sympy import Rational, expand, symbols
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor, rationalize,
)

from eqsolver.engine import (
    COEFFICIENT_MAX, COEFFICIENT_MIN, EquationSolver, SolveStatus,
)

logger = logging.getLogger(__name__)

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    rationalize,  # "0.5" -> Rational(1, 2)
)

_ALLOWED_CHARS = set("abcdefghijklmnopqrstuvwxyz"
                     "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                     "0123456789"
                     " \t+-*/^=()[]{}.,;")

_OUTCOME_TEXT = {
    SolveStatus.NO_SOLUTIONS: (
        "No solution — the system is inconsistent.\n"
        "Elimination produced an equation of the form 0 = c with c ≠ 0."
    ),
    SolveStatus.INFINITE_SOLUTIONS: (
        "Infinite solutions — the equations are dependent.\n"
        "At least one unknown can take any value."
    ),
    SolveStatus.OVERFLOW: (
        "Overflow — an exact intermediate value left the 32-bit fraction range.\n"
        "No partial solution is reported."
    ),
    SolveStatus.MEMORY_ERROR: "Memory error — the working matrix could not be allocated.",
}


# ── Array input ─────────────────────────────────────────────────────────

def load_matrix(solver: EquationSolver, coefficients) -> EquationSolver:
    """Size *solver* from an N x (N+1) integer array and write every cell.

    Raises ``ValueError`` for a wrong shape or a non-integer dtype and
    ``MemoryError`` when the solver could not allocate its storage.
    """
    array = np.asarray(coefficients)
    if array.ndim != 2 or array.shape[1] != array.shape[0] + 1:
        raise ValueError(
            f"Coefficients must form an N x (N+1) augmented matrix, "
            f"got shape {array.shape}."
        )
    if not np.issubdtype(array.dtype, np.integer):
        raise ValueError(
            f"Coefficients must be integers, got dtype '{array.dtype}'."
        )

    n = array.shape[0]
    if not solver.set_system_eq_count(n):
        raise MemoryError(f"Could not allocate a {n}-equation system.")
    for (i, j), value in np.ndenumerate(array):
        solver.set_coefficient(i + 1, j + 1, int(value))
    return solver


# ── Text input ──────────────────────────────────────────────────────────

def _validate_characters(text: str) -> None:
    bad = sorted(set(ch for ch in text if ch not in _ALLOWED_CHARS))
    if bad:
        raise ValueError(
            f"Invalid character(s): {' '.join(bad)}\n"
            f"Only letters, numbers, and math symbols "
            f"(+ - * / ^ = ( ) . , ;) are allowed."
        )


def _detect_variables(text: str) -> list:
    """Return the sorted single-letter unknowns in *text*.

    Multi-letter tokens are implicit products (``xy`` is x·y), so every
    letter counts as its own unknown.
    """
    letters = set()
    for token in re.findall(r'[A-Za-z]+', text):
        letters.update(token)
    if not letters:
        raise ValueError("No variable found. Include a letter like x, y, or z.")
    return sorted(letters)


def _expand_implicit_vars(s: str, var_names: set) -> str:
    """Turn ``xy`` into ``x*y`` so Python keywords (``as``, ``in``) never
    reach the parser."""
    def _repl(m):
        tok = m.group(0)
        if all(ch in var_names for ch in tok):
            return '*'.join(tok)
        return tok
    return re.sub(r'[A-Za-z]+', _repl, s)


def _parse_side(expr_str: str, var_symbols: list):
    s = expr_str.strip().replace('^', '**')
    local = {sym.name: sym for sym in var_symbols}
    s = _expand_implicit_vars(s, set(local.keys()))
    try:
        return parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{expr_str}'. Error: {e}")


def _split_equations(text: str) -> list:
    text = text.replace('[', '(').replace(']', ')')
    text = text.replace('{', '(').replace('}', ')')
    _validate_characters(text)
    return [eq.strip() for eq in re.split(r'\s*[;,]\s*', text) if eq.strip()]


def _equation_row(eq_str: str, var_symbols: list) -> list:
    """Return ``[a_1, ..., a_n, b]`` for ``a_1 x_1 + ... + a_n x_n = b``."""
    if '=' not in eq_str:
        raise ValueError(f"Each equation must contain '='. Problem: {eq_str}")
    parts = eq_str.split('=')
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ValueError(
            f"Each equation must have exactly one '=' with both sides filled. "
            f"Problem: {eq_str}"
        )
    lhs = _parse_side(parts[0], var_symbols)
    rhs = _parse_side(parts[1], var_symbols)
    combined = expand(lhs - rhs)

    poly = combined.as_poly(*var_symbols)
    if poly is None or poly.total_degree() > 1:
        raise ValueError(f"Equation is not linear: {eq_str}")

    row = []
    remaining = combined
    for vs in var_symbols:
        coeff = combined.coeff(vs)
        row.append(coeff)
        remaining = remaining - coeff * vs
    row.append(-expand(remaining))

    for value in row:
        if not isinstance(value, Rational):
            raise ValueError(
                f"Coefficient '{value}' in '{eq_str}' is not an exact rational number."
            )
    return row


def parse_system(text: str) -> tuple[list, list]:
    """Parse ``"x + y = 3, x - y = 1"`` into ``(names, augmented_rows)``.

    Each row holds N+1 ``sympy.Rational`` values.  The number of equations
    must equal the number of unknowns.
    """
    raw_equations = _split_equations(text)
    if not raw_equations:
        raise ValueError("No equations given. Example: x + y = 3, x - y = 1")
    var_names = _detect_variables(' '.join(raw_equations))
    if len(raw_equations) != len(var_names):
        raise ValueError(
            f"The system must be square: found {len(raw_equations)} "
            f"equation{'s' if len(raw_equations) != 1 else ''} and "
            f"{len(var_names)} unknown{'s' if len(var_names) != 1 else ''} "
            f"({', '.join(var_names)})."
        )
    var_symbols = [symbols(v) for v in var_names]
    rows = [_equation_row(eq, var_symbols) for eq in raw_equations]
    return var_names, rows


def load_rows(solver: EquationSolver, rows: list) -> EquationSolver:
    """Write rational augmented *rows* into *solver* as fractions."""
    n = len(rows)
    if not solver.set_system_eq_count(n):
        raise MemoryError(f"Could not allocate a {n}-equation system.")
    for i, row in enumerate(rows, 1):
        for j, value in enumerate(row, 1):
            value = Rational(value)
            p, q = int(value.p), int(value.q)
            if not (COEFFICIENT_MIN <= p <= COEFFICIENT_MAX
                    and COEFFICIENT_MIN <= q <= COEFFICIENT_MAX):
                raise ValueError(
                    f"Coefficient {value} (row {i}, column {j}) is outside the "
                    f"supported range {COEFFICIENT_MIN}..{COEFFICIENT_MAX}."
                )
            solver.set_coefficient_fraction(i, j, p, q)
    return solver


# ── Step-by-step trail ──────────────────────────────────────────────────

def _format_matrix(rows: list) -> str:
    return "\n".join("[" + ", ".join(str(v) for v in row) + "]" for row in rows)


def _verification_steps(raw_equations: list, var_symbols: list,
                        values: list) -> tuple[list, bool]:
    steps = [{
        "description": "Substitute into every equation",
        "expression": ", ".join(f"{vs} = {val}" for vs, val in zip(var_symbols, values)),
        "explanation": "Plug the exact solution back into each original equation.",
    }]
    sub_dict = dict(zip(var_symbols, values))
    all_ok = True
    for i, eq_str in enumerate(raw_equations, 1):
        lhs_s, rhs_s = eq_str.split('=')
        lhs_val = _parse_side(lhs_s, var_symbols).subs(sub_dict)
        rhs_val = _parse_side(rhs_s, var_symbols).subs(sub_dict)
        ok = expand(lhs_val - rhs_val) == 0
        all_ok = all_ok and ok
        steps.append({
            "description": f"Equation ({i}): {eq_str}",
            "expression": f"LHS = {lhs_val},  RHS = {rhs_val}  →  {'✓' if ok else '✗'}",
            "explanation": (
                f"Both sides equal {lhs_val}." if ok
                else "Sides differ — the solution does not satisfy this equation."
            ),
        })
    return steps, all_ok


def solve_text(text: str, settings: Optional[dict] = None) -> dict:
    """Solve a text system exactly and return a step-by-step result dict.

    The dict has the sections ``equation``, ``given``, ``method``, ``steps``,
    ``final_answer``, ``verification_steps`` and ``summary``;
    ``summary["status"]`` carries the :class:`SolveStatus` name.
    """
    t_start = time.perf_counter()
    raw_equations = _split_equations(text)
    var_names, rows = parse_system(text)
    var_symbols = [symbols(v) for v in var_names]
    n = len(var_names)

    solver = EquationSolver.from_settings(settings)
    load_rows(solver, rows)
    status = solver.solve_system()
    logger.debug("Text system %r solved with status %s", text, status.name)

    steps = [
        {
            "description": "System of equations",
            "expression": "\n".join(
                f"  ({i + 1})  {eq}" for i, eq in enumerate(raw_equations)),
            "explanation": (
                f"We have {n} equation{'s' if n != 1 else ''} "
                f"with {n} unknown{'s' if n != 1 else ''}: {', '.join(var_names)}."
            ),
        },
        {
            "description": "Build the augmented matrix",
            "expression": _format_matrix(rows),
            "explanation": (
                "Each row lists the coefficients of "
                f"{', '.join(var_names)} followed by the constant on the right-hand side."
            ),
        },
        {
            "description": "Gauss-Jordan elimination with exact fractions",
            "expression": f"Outcome: {status.name.replace('_', ' ').lower()}",
            "explanation": (
                "Each column is normalised on its pivot and cleared from every "
                "other row using exact fraction arithmetic, then the result is "
                "checked against the original equations."
            ),
        },
    ]
    if status in (SolveStatus.SOLVED, SolveStatus.NO_SOLUTIONS,
                  SolveStatus.INFINITE_SOLUTIONS):
        steps.append({
            "description": "Reduced augmented matrix",
            "expression": _format_matrix(solver.working.to_strings()),
            "explanation": "The working matrix after elimination stopped.",
        })

    verification_steps = []
    validation_status = "pass"
    if status is SolveStatus.SOLVED:
        values = solver.solution_as_rationals()
        for name, value in zip(var_names, values):
            steps.append({
                "description": f"{name} = {value}",
                "expression": f"{name} = {value}",
                "explanation": f"Read {name} from the right-hand side of its reduced row.",
            })
        final_answer = "\n".join(f"{name} = {value}" for name, value in zip(var_names, values))
        verification_steps, ok = _verification_steps(raw_equations, var_symbols, values)
        validation_status = "pass" if ok else "fail"
    else:
        final_answer = _OUTCOME_TEXT[status]
        if status in (SolveStatus.OVERFLOW, SolveStatus.MEMORY_ERROR):
            validation_status = "fail"

    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    for i, s in enumerate(verification_steps, 1):
        s["step_number"] = i

    runtime_ms = round((time.perf_counter() - t_start) * 1000, 2)
    return {
        "equation": text,
        "given": {
            "problem": "Solve the system of linear equations exactly",
            "inputs": {
                "equations": text,
                "number_of_equations": str(n),
                "variables": ", ".join(var_names),
                "number_of_variables": str(n),
            },
        },
        "method": {
            "name": "Gauss-Jordan Elimination (exact fractions)",
            "description": (
                "Build the augmented matrix and reduce it with 32-bit exact "
                "fraction arithmetic, detecting overflow instead of rounding."
            ),
            "parameters": {
                "equation_type": f"System of {n} linear equation{'s' if n != 1 else ''}",
                "variables": ", ".join(var_names),
                "approach": "Augmented matrix → Pivot → Eliminate → Verify",
            },
        },
        "steps": steps,
        "final_answer": final_answer,
        "verification_steps": verification_steps,
        "summary": {
            "status": status.name,
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": validation_status,
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"SymPy {sympy.__version__}",
        },
    }
