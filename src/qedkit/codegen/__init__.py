"""
The CODEGEN layer turns symbolic results into an importable numeric library.
"""
from qedkit.codegen.library import Library
from qedkit.codegen.printer import LibraryPrinter

__all__ = ["Library", "LibraryPrinter"]
