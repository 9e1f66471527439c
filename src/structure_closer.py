"""
Structure closer: appends the closers a truncated document is missing.

Brackets are appended before braces (``]`` then ``}``): in manifests arrays
usually sit inside objects (``"files": [...`` cut off inside the root
object). The pass only ever appends.
"""

from __future__ import annotations

from json_diagnostics import Diagnostic, DiagnosticKind, line_col
from json_scanner import ends_in_open_string, mask_strings


def count_unmatched(text: str) -> tuple[int, int]:
    """(missing ``]``, missing ``}``) counted outside string literals.

    Surplus closers count as zero; this pass does not delete them.
    """
    masked = mask_strings(text)
    missing_brackets = masked.count("[") - masked.count("]")
    missing_braces = masked.count("{") - masked.count("}")
    return max(missing_brackets, 0), max(missing_braces, 0)


def fix_malformed_structures(text: str, diagnostics: list[Diagnostic]) -> str:
    # Closers appended after an unterminated string would land inside it.
    if ends_in_open_string(text):
        return text

    missing_brackets, missing_braces = count_unmatched(text)
    if not missing_brackets and not missing_braces:
        return text

    line, col = line_col(text, len(text))
    for _ in range(missing_brackets):
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.MALFORMED_ARRAY,
            line=line,
            column=col,
            description="Missing closing bracket",
            fix_description="Added missing closing bracket",
        ))
    for _ in range(missing_braces):
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.MALFORMED_OBJECT,
            line=line,
            column=col,
            description="Missing closing brace",
            fix_description="Added missing closing brace",
        ))
    return text + "]" * missing_brackets + "}" * missing_braces
