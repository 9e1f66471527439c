"""
Quote normalizer: wraps bare-word property keys in double quotes.

    {name: "pkg", version: "1.0.0"}  ->  {"name": "pkg", "version": "1.0.0"}

A bare word is rewritten only when it sits right after ``{``, ``,`` or the
indentation at the start of a line, and is followed (ignoring whitespace) by
``:``. Keys that are already quoted never match, so running the pass on its
own output changes nothing.
"""

from __future__ import annotations

import re

from json_diagnostics import Diagnostic, DiagnosticKind, line_col
from json_scanner import mask_strings

_UNQUOTED_KEY_RE = re.compile(
    r"(?:^|(?<=[{,]))[ \t]*([a-zA-Z_$][a-zA-Z0-9_$]*)(?=[ \t]*:)",
    re.MULTILINE,
)


def fix_missing_quotes(text: str, diagnostics: list[Diagnostic]) -> str:
    """Quote unquoted property names outside string literals."""
    masked = mask_strings(text)
    parts: list[str] = []
    prev = 0
    for m in _UNQUOTED_KEY_RE.finditer(masked):
        start, end = m.span(1)
        name = text[start:end]
        line, col = line_col(text, start)
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.MISSING_QUOTE,
            line=line,
            column=col,
            description=f"Missing quotes around property name: {name}",
            fix_description=f'Added quotes around property name: "{name}"',
        ))
        parts.append(text[prev:start])
        parts.append(f'"{name}"')
        prev = end
    if not parts:
        return text
    parts.append(text[prev:])
    return "".join(parts)
