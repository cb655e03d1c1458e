"""
fns - Error base class
Shared position bookkeeping and source-excerpt reporting for all phases.
"""

from typing import Optional


class FnsError(Exception):
    """Base class for lexer, parser and evaluation errors."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(
            f"[{type(self).__name__}] Line {line}, column {column}: {message}"
        )
        self.message = message
        self.line = line
        self.column = column

    def format(self, source: Optional[str] = None, radius: int = 1) -> str:
        """Render the error followed by the surrounding source lines."""
        report = str(self)
        if source:
            context = source_context(source, self.line, self.column, radius)
            if context:
                report = f"{report}\n{context}"
        return report


def source_context(source: str, line: int, column: Optional[int], radius: int = 1) -> str:
    lines = source.splitlines()
    if not line or line < 1 or line > len(lines):
        return ""
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    width = len(str(end))
    out = []
    for i in range(start, end + 1):
        prefix = ">" if i == line else " "
        out.append(f"{prefix} {str(i).rjust(width)} | {lines[i - 1]}")
        if i == line and column is not None:
            caret = " " * max(column - 1, 0)
            out.append(f"  {' ' * width} | {caret}^")
    return "\n".join(out)
