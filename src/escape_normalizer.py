r"""
Escape normalizer: doubles backslashes that do not start a valid JSON escape.

Valid escapes are \", \\, \/, \b, \f, \n, \r, \t and \uXXXX (four hex
digits). Valid pairs are consumed whole, so an already-escaped backslash is
never split; every other backslash becomes \\. Windows paths in manifests
are the usual source:

    "main": "dist\index.js"   ->   "main": "dist\\index.js"
"""

from __future__ import annotations

import re

from json_diagnostics import Diagnostic, DiagnosticKind, line_col

_SIMPLE_ESCAPES = frozenset('"\\/bfnrt')
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")


def _is_valid_escape(text: str, i: int) -> bool:
    """Whether the backslash at ``text[i]`` starts a valid escape."""
    if i + 1 >= len(text):
        return False
    nxt = text[i + 1]
    if nxt in _SIMPLE_ESCAPES:
        return True
    if nxt == "u":
        return _HEX4_RE.match(text, i + 2) is not None
    return False


def fix_invalid_escapes(text: str, diagnostics: list[Diagnostic]) -> str:
    if "\\" not in text:
        return text

    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if _is_valid_escape(text, i):
            out.append(text[i:i + 2])
            i += 2
            continue
        following = text[i + 1] if i + 1 < n else ""
        line, col = line_col(text, i)
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.INVALID_ESCAPE,
            line=line,
            column=col,
            description=f"Invalid escape sequence: \\{following}".rstrip(),
            fix_description="Escaped backslash",
        ))
        out.append("\\\\")
        i += 1
    return "".join(out)
