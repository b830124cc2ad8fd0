"""
Logging setup for EqSolver.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed once by the entry point through :func:`configure_logging`.
"""

import logging
import sys

DEFAULT_FORMAT = "[%(levelname)s] %(name)s — %(message)s"


def configure_logging(level="WARNING", fmt: str = DEFAULT_FORMAT,
                      stream=None) -> logging.Logger:
    """Attach a single stream handler to the ``eqsolver`` logger.

    *level* may be a level name (``"DEBUG"``) or a number.  Calling this
    again replaces the previous handler instead of stacking a second one.
    *stream* defaults to the current ``sys.stderr``.
    """
    if stream is None:
        stream = sys.stderr
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: '{level}'.")
        level = resolved

    root = logging.getLogger("eqsolver")
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root
