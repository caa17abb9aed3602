"""Diagnostic messages for the sb2 importer.

This module provides error and warning reporting during an import,
tracking issues like unknown legacy opcodes and malformed records.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class DiagnosticLevel(Enum):
    """Severity level for diagnostic messages."""
    ERROR = "Error"
    WARNING = "Warning"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    level: DiagnosticLevel
    message: str
    target: str
    opcode: Optional[str] = None

    def __str__(self) -> str:
        loc = f"Target '{self.target}'"
        if self.opcode is not None:
            loc += f" Block '{self.opcode}'"
        return f"{self.level.value}: {self.message}: {loc}"


@dataclass
class DiagnosticContext:
    """Context for collecting diagnostics during one import."""
    target_name: str = "Stage"
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def set_target(self, target_name: str) -> None:
        """Set the target name attached to subsequent diagnostics."""
        self.target_name = target_name

    def add(self, level: DiagnosticLevel, message: str, opcode: Optional[str] = None) -> None:
        """Add a diagnostic message."""
        self.diagnostics.append(Diagnostic(
            level=level,
            message=message,
            target=self.target_name,
            opcode=opcode,
        ))

    def error(self, message: str, opcode: Optional[str] = None) -> None:
        self.add(DiagnosticLevel.ERROR, message, opcode)

    def warning(self, message: str, opcode: Optional[str] = None) -> None:
        self.add(DiagnosticLevel.WARNING, message, opcode)

    def get_warnings(self) -> List[Diagnostic]:
        """Get all warning diagnostics."""
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.WARNING]


def summarize(diagnostics: List[Diagnostic]) -> str:
    """Return a summary like '2 warnings' or 'No issues'."""
    errors = sum(1 for d in diagnostics if d.level == DiagnosticLevel.ERROR)
    warnings = sum(1 for d in diagnostics if d.level == DiagnosticLevel.WARNING)
    parts = []
    if errors:
        parts.append(f"{errors} error{'s' if errors != 1 else ''}")
    if warnings:
        parts.append(f"{warnings} warning{'s' if warnings != 1 else ''}")
    return ", ".join(parts) if parts else "No issues"


class DiagnosticCollector:
    """Global collector for diagnostics across several imports."""

    def __init__(self) -> None:
        self.all_diagnostics: List[Diagnostic] = []

    def add_context_diagnostics(self, ctx: DiagnosticContext) -> None:
        """Add all diagnostics from a context."""
        self.all_diagnostics.extend(ctx.diagnostics)

    def has_errors(self) -> bool:
        return any(d.level == DiagnosticLevel.ERROR for d in self.all_diagnostics)

    def print_all(self) -> None:
        """Print all diagnostics to stdout."""
        for diag in self.all_diagnostics:
            print(diag)

    def summary(self) -> str:
        return summarize(self.all_diagnostics)
