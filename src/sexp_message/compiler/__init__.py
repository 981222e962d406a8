from .driver import CompilerDriver, CompilationResult

__all__ = ["CompilerDriver", "CompilationResult"]
