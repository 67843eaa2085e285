"""
Input/Output Manager (HDF5)
Handles saving and loading named symbolic expressions to .h5 files.
"""
from __future__ import annotations

import json
import logging
import os
from importlib.metadata import version, PackageNotFoundError
from typing import Optional

import h5py
import numpy as np
import sympy

from qedkit.symbolic.loop_functions import LOOP_FUNCTIONS

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("qedkit")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

# HDF5 attributes are limited to 64KB
_ATTRIBUTE_LIMIT = 60000


def _as_text(value) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class IOManager:

    @staticmethod
    def save_expressions(
        filepath: str | os.PathLike,
        expressions: dict[str, sympy.Expr],
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """
        Save expressions by name, preserving their order.

        Expressions are stored as ``sympy.srepr`` strings, so symbol
        assumptions survive the round trip.
        """
        logger.info(f"Saving {len(expressions)} expression(s) to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                f.attrs["order"] = json.dumps(list(expressions))
                for key, val in (metadata or {}).items():
                    f.attrs[key] = str(val)

                grp = f.create_group("expressions")
                for name, expr in expressions.items():
                    text = sympy.srepr(expr)
                    # Use dataset if data exceeds HDF5 attribute size limit
                    if len(text) > _ATTRIBUTE_LIMIT:
                        logger.debug(f"Expression '{name}' is large ({len(text)} bytes), using dataset")
                        grp.create_dataset(name, data=np.void(text.encode('utf-8')))
                    else:
                        grp.attrs[name] = text

        except Exception as e:
            logger.exception(f"Failed to save expressions: {e}")
            raise

    @staticmethod
    def load_expressions(filepath: str | os.PathLike) -> dict[str, sympy.Expr]:
        logger.info(f"Loading expressions from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        expressions: dict[str, sympy.Expr] = {}
        with h5py.File(filepath, "r") as f:
            order = json.loads(_as_text(f.attrs["order"]))
            grp = f["expressions"]
            for name in order:
                if name in grp:
                    text = bytes(grp[name][()]).decode('utf-8')
                else:
                    text = _as_text(grp.attrs[name])
                expressions[name] = sympy.sympify(text, locals=dict(LOOP_FUNCTIONS))

        logger.debug(f"Loaded {len(expressions)} expression(s).")
        return expressions

    @staticmethod
    def load_metadata(filepath: str | os.PathLike) -> dict[str, str]:
        with h5py.File(filepath, "r") as f:
            return {key: _as_text(val) for key, val in f.attrs.items()}
