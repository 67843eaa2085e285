"""
Numeric Library Generation
==========================
Accumulates (function name, expression) pairs and emits them as an
importable Python package.

Layout of a built library ``<path>/<name>/``::

    __init__.py          exports Params and every function
    params.py            dataclass with one field per free symbol, plus mu_sq;
                         symbols without a value given to constant_s are
                         required fields
    <function>.py        one module per function
    expressions.h5       archive of the evaluated expressions

Abbreviations become local assignments inside the generated functions, so
a function built from an abbreviated expression and one built from its
evaluated form compute the same number.
"""
from __future__ import annotations

import importlib
import importlib.util
import logging
import os
import py_compile
import shutil
import sys
from pathlib import Path
from types import ModuleType
from typing import Optional

import sympy

from qedkit import config
from qedkit.codegen.printer import LibraryPrinter
from qedkit.errors import LibraryBuildError
from qedkit.io import IOManager
from qedkit.symbolic.abbreviations import abbreviations
from qedkit.symbolic.constants import constant_values
from qedkit.utils import is_valid_identifier

logger = logging.getLogger(__name__)

_RESERVED_MODULES = {"params"}


class Library:
    """
    Named numeric library.
    """

    def __init__(self, name: str, path: Optional[str | os.PathLike] = None) -> None:
        """
        Args:
            name: Package name of the generated library.
            path: Directory the package is created in; the current working
                directory by default.
        """
        if not is_valid_identifier(name):
            raise ValueError(f"Library name '{name}' is not a valid Python identifier.")
        self.name = name
        self.path = config.get_output_path(base=path)
        self._functions: dict[str, sympy.Expr] = {}
        self._printer = LibraryPrinter(scale_name="mu_sq")

    def __repr__(self) -> str:
        return f"Library(name='{self.name}', path='{self.path}', functions={self.functions})"

    @property
    def directory(self) -> Path:
        return self.path / self.name

    @property
    def functions(self) -> list[str]:
        return list(self._functions)

    def clean_existing_sources(self) -> None:
        """Remove a previously generated version of this library."""
        if self.directory.exists():
            logger.info(f"Removing existing sources in {self.directory}")
            shutil.rmtree(self.directory)
        else:
            logger.debug(f"No existing sources in {self.directory}")

    def add_function(self, name: str, expr: sympy.Expr) -> None:
        """
        Register ``expr`` under the function name ``name``.

        Raises:
            ValueError: For an invalid, reserved or duplicate name.
        """
        if not is_valid_identifier(name) or name.startswith("__"):
            raise ValueError(f"Function name '{name}' is not a valid Python identifier.")
        if name in _RESERVED_MODULES:
            raise ValueError(f"Function name '{name}' is reserved.")
        if name in self._functions:
            raise ValueError(f"Function '{name}' already exists in library '{self.name}'.")
        self._functions[name] = sympy.sympify(expr)
        logger.info(f"Added function '{name}' to library '{self.name}'")

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _parameters(self, expr: sympy.Expr) -> list[sympy.Symbol]:
        return sorted(abbreviations.expand(expr).free_symbols, key=lambda s: s.name)

    def _render_params(self) -> str:
        values = constant_values()
        fields: dict[str, Optional[float]] = {}
        for expr in self._functions.values():
            for symbol in self._parameters(expr):
                fields[self._printer.doprint(symbol)] = values.get(symbol)
        fields.pop("mu_sq", None)

        lines = [
            f'"""Parameters of the \'{self.name}\' library. Generated by qedkit."""',
            "from dataclasses import dataclass",
            "",
            "",
            "@dataclass",
            "class Params:",
        ]
        # Constants without a value are required and come before defaulted fields
        required = sorted(name for name, value in fields.items() if value is None)
        defaulted = sorted(name for name, value in fields.items() if value is not None)
        lines += [f"    {field_name}: float" for field_name in required]
        lines += [f"    {field_name}: float = {fields[field_name]!r}" for field_name in defaulted]
        lines.append(f"    mu_sq: float = {config.DEFAULT_MU_SQ!r}")
        return "\n".join(lines) + "\n"

    def _render_function(self, name: str, expr: sympy.Expr) -> str:
        lines = [
            f'"""Function \'{name}\' of the \'{self.name}\' library. Generated by qedkit."""',
            "import numpy",
            "",
            "from qedkit.numerics import loop_integrals as loop",
            "",
            "",
            f"def {name}(params):",
        ]
        for symbol in self._parameters(expr):
            printed = self._printer.doprint(symbol)
            if printed != "mu_sq":
                lines.append(f"    {printed} = params.{printed}")
        lines.append("    mu_sq = params.mu_sq")
        for symbol in abbreviations.used_in(expr):
            definition = abbreviations.definition(symbol)
            lines.append(f"    {self._printer.doprint(symbol)} = {self._printer.doprint(definition)}")
        lines.append(f"    return {self._printer.doprint(expr)}")
        return "\n".join(lines) + "\n"

    def _render_init(self) -> str:
        lines = [
            f'"""Numeric library \'{self.name}\'. Generated by qedkit."""',
            "from .params import Params",
        ]
        lines += [f"from .{name} import {name}" for name in self._functions]
        exported = ", ".join(f'"{name}"' for name in ["Params", *self._functions])
        lines += ["", f"__all__ = [{exported}]"]
        return "\n".join(lines) + "\n"

    def build(self) -> Path:
        """
        Write and byte-compile the library.

        Returns:
            The package directory.

        Raises:
            LibraryBuildError: If no function was added, or a source fails to
                generate or compile.
        """
        if not self._functions:
            raise LibraryBuildError(f"Library '{self.name}' has no function to build.")

        logger.info(f"Building library '{self.name}' ({len(self._functions)} function(s)) in {self.directory}")
        self.directory.mkdir(parents=True, exist_ok=True)

        sources: dict[str, str] = {}
        try:
            sources["params.py"] = self._render_params()
            for name, expr in self._functions.items():
                sources[f"{name}.py"] = self._render_function(name, expr)
            sources["__init__.py"] = self._render_init()
        except Exception as e:
            logger.error(f"Code generation failed: {e}")
            raise LibraryBuildError(f"Code generation failed for library '{self.name}': {e}") from e

        for filename, source in sources.items():
            (self.directory / filename).write_text(source, encoding="utf-8")
            logger.debug(f"Wrote {filename}")

        for filename in sources:
            try:
                py_compile.compile(str(self.directory / filename), doraise=True)
            except py_compile.PyCompileError as e:
                logger.error(f"Compilation of {filename} failed: {e.msg}")
                raise LibraryBuildError(f"Compilation of {filename} failed.") from e

        IOManager.save_expressions(
            self.directory / config.EXPRESSIONS_ARCHIVE,
            {name: abbreviations.expand(expr) for name, expr in self._functions.items()},
            metadata={"library": self.name},
        )

        logger.info(f"Library '{self.name}' built.")
        return self.directory

    def load(self) -> ModuleType:
        """Import the built library, replacing any previously imported version."""
        init_file = self.directory / "__init__.py"
        if not init_file.exists():
            raise LibraryBuildError(f"Library '{self.name}' has not been built in {self.directory}.")

        for key in [k for k in sys.modules if k == self.name or k.startswith(f"{self.name}.")]:
            del sys.modules[key]
        importlib.invalidate_caches()

        spec = importlib.util.spec_from_file_location(
            self.name, init_file, submodule_search_locations=[str(self.directory)]
        )
        module = importlib.util.module_from_spec(spec)
        sys.modules[self.name] = module
        spec.loader.exec_module(module)
        return module
