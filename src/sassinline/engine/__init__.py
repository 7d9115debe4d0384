"""Compile engine: orchestration and run-wide diagnostics."""

from sassinline.engine.orchestrator import Orchestrator
from sassinline.engine.report import DiagnosticLog, banner

__all__ = ["Orchestrator", "DiagnosticLog", "banner"]
