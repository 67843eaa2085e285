"""
Configuration & Path Management
===============================
This module serves as the central registry for output paths and global
numerical constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers scattered
   throughout the code.
2. Reproducibility: Quadrature orders and the renormalization scale used by
   the numeric loop functions are defined in one place.

Exports:
    LIBRARY_NAME (str): Name of the generated numeric library.
    FIGURES_DIR (str): Directory (relative to the output path) for diagrams.
    DEFAULT_MU_SQ (float): Default squared renormalization scale.
"""
import os
from pathlib import Path
from typing import Optional


def get_output_path(relative_path: str = "", base: Optional[str | os.PathLike] = None) -> Path:
    """
    Get absolute path for generated artifacts.

    Artifacts are written relative to ``base`` when given, otherwise relative
    to the current working directory (the directory the driver is run from).
    """
    base_path: Path = Path(base) if base is not None else Path.cwd()
    return (base_path / relative_path).resolve()


# Global Constants
LIBRARY_NAME: str = "demolib"
FIGURES_DIR: str = "figures"
EXPRESSIONS_ARCHIVE: str = "expressions.h5"

# Squared MS-bar renormalization scale used when none is given
DEFAULT_MU_SQ: float = 1.0

# Gauss-Legendre points per direction for three-point functions
TRIANGLE_GAUSS_POINTS: int = 48

# Width of the -i0 prescription, relative to the largest kinematic scale
I0_RELATIVE_WIDTH: float = 1e-20
