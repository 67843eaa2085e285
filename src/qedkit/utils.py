from __future__ import annotations

import functools
import keyword
import logging
import re
import time
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def timer(func: F) -> F:
    """Log the wall time spent in ``func``."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start
        logger.info(f"{func.__name__} finished in {elapsed:.2f} s")
        return result
    return wrapper  # type: ignore[return-value]


def is_valid_identifier(name: str) -> bool:
    """Check that ``name`` can be used as a Python function or module name."""
    return bool(_IDENTIFIER.match(name)) and not keyword.iskeyword(name)


def split_name_spec(spec: str) -> tuple[str, str]:
    """
    Split a ``"name ; latex"`` particle specification.

    **Example**:

        split_name_spec("mu ; \\\\mu")   # ("mu", "\\\\mu")
        split_name_spec("tau")          # ("tau", "tau")
    """
    if ";" in spec:
        name, latex = spec.split(";", 1)
        name, latex = name.strip(), latex.strip()
    else:
        name = latex = spec.strip()
    if not name:
        raise ValueError(f"Empty particle name in specification '{spec}'.")
    return name, latex or name
