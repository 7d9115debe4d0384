"""Stylesheet compiler backends."""

from sassinline.compiler.base import CompileResult, Compiler
from sassinline.compiler.libsass import LibsassCompiler

__all__ = ["CompileResult", "Compiler", "LibsassCompiler"]
