"""sassinline model layer -- public type re-exports."""

from sassinline.model.diagnostic import Diagnostic, parse_diagnostic
from sassinline.model.library import LibraryPaths
from sassinline.model.unit import CompileUnit, OutputFile, OutputStyle, UnitState

__all__ = [
    # unit
    "CompileUnit",
    "OutputFile",
    "OutputStyle",
    "UnitState",
    # library
    "LibraryPaths",
    # diagnostic
    "Diagnostic",
    "parse_diagnostic",
]
