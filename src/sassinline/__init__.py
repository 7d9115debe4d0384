"""sassinline: compile Sass with clean source maps and inlined url() assets."""

from sassinline.config import SassConfig
from sassinline.engine.orchestrator import Orchestrator
from sassinline.model.unit import CompileUnit, OutputFile, OutputStyle

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SassConfig",
    "Orchestrator",
    "CompileUnit",
    "OutputFile",
    "OutputStyle",
]
