"""
Source Location (Span)

Rust Pattern: rustc_span::Span
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location (Rust Span pattern).

    - File, line, column (1-based, as reported by the parser)
    - Optional byte offsets and end position for caret rendering
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column (Rust pattern)"""
        return f"{self.file}:{self.line}:{self.column}"

    @property
    def column0(self) -> int:
        """0-based column, the convention of position strings lifted into generated code."""
        return max(self.column - 1, 0)


GENERATED_LOCATION = SourceLocation(file="<generated>", line=0, column=0)
