"""
Diagnostic records and the remediation outcome.

Every repair pass appends Diagnostic entries to a list owned by the caller
(one list per remediation call). The driver freezes that list into a
RepairOutcome at the end of the call.

Usage:
    from json_diagnostics import Diagnostic, DiagnosticKind, RepairOutcome
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiagnosticKind(str, Enum):
    """Classes of syntax corrections."""

    MISSING_COMMA = "missing-comma"
    TRAILING_COMMA = "trailing-comma"
    MISSING_QUOTE = "missing-quote"
    INVALID_ESCAPE = "invalid-escape"
    MALFORMED_OBJECT = "malformed-object"
    MALFORMED_ARRAY = "malformed-array"


@dataclass(frozen=True)
class Diagnostic:
    """A single correction applied to the working text."""

    kind: DiagnosticKind
    line: int  # 1-based; 0 when no line could be derived
    column: int
    description: str
    fix_description: str

    def __repr__(self) -> str:
        loc = f" (line {self.line})" if self.line else ""
        return f"[{self.kind.value}]{loc}: {self.description} -> {self.fix_description}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "line": self.line,
            "column": self.column,
            "description": self.description,
            "fix_description": self.fix_description,
        }


@dataclass
class RepairOutcome:
    """Result of one remediation call."""

    succeeded: bool
    repaired_text: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    unfixable_reasons: list[str] = field(default_factory=list)

    @property
    def was_modified(self) -> bool:
        return len(self.diagnostics) > 0

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "repaired_text": self.repaired_text,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "unfixable_reasons": list(self.unfixable_reasons),
        }


def line_col(text: str, pos: int) -> tuple[int, int]:
    """1-based (line, column) of offset ``pos`` in ``text``."""
    line = text.count("\n", 0, pos) + 1
    col = pos - (text.rfind("\n", 0, pos) + 1) + 1
    return line, col
