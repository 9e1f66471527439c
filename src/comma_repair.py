"""
Comma repair: inserts missing commas between siblings, strips trailing ones.

One pass runs three steps in a fixed order:

  1. Inline insertion — two values side by side on one line
     (``"1" "b"``, ``} "b"``, ``42 "b"``, ``true {``) get a comma in place of
     the whitespace between them.
  2. Line-end insertion — a line ending in a value or closer gets a comma
     when the next non-empty line is a sibling (json_scanner.is_sibling).
  3. Trailing removal — a ``},`` / ``],`` line whose next line is deeper,
     a closer, or missing loses its comma; then any comma followed only by
     whitespace and a closer is removed.

Removal runs last because insertion can place a comma that only turns out
to be trailing once the closer after it is considered.
"""

from __future__ import annotations

import re
from typing import Optional

from json_diagnostics import Diagnostic, DiagnosticKind, line_col
from json_scanner import (
    CLOSERS,
    OPENERS,
    LineRole,
    classify_line,
    ends_with_comma,
    ends_with_value,
    indent_of,
    is_scalar_token,
    is_sibling,
    line_depth_delta,
    mask_strings,
    next_significant,
)

_WORD_RE = re.compile(r"[A-Za-z0-9_$.+\-]+")
_TRAILING_COMMA_RE = re.compile(r",(?=\s*[}\]])")

# Token kinds produced by _tokens()
_STRING = "string"
_OPEN_STRING = "open_string"
_SCALAR = "scalar"
_KEY = "key"
_WORD = "word"
_OPEN = "open"
_CLOSE = "close"
_PUNCT = "punct"

_VALUE_END = frozenset({_STRING, _SCALAR, _CLOSE})
_VALUE_START = frozenset({_STRING, _OPEN_STRING, _SCALAR, _KEY, _OPEN})


def _tokens(masked: str) -> list[tuple[str, int, int]]:
    """Split a masked line into (kind, start, end) tokens."""
    toks: list[tuple[str, int, int]] = []
    i = 0
    n = len(masked)
    while i < n:
        ch = masked[i]
        if ch.isspace():
            i += 1
        elif ch == '"':
            close = masked.find('"', i + 1)
            if close == -1:
                toks.append((_OPEN_STRING, i, n))
                i = n
            else:
                toks.append((_STRING, i, close + 1))
                i = close + 1
        elif ch in OPENERS:
            toks.append((_OPEN, i, i + 1))
            i += 1
        elif ch in CLOSERS:
            toks.append((_CLOSE, i, i + 1))
            i += 1
        else:
            m = _WORD_RE.match(masked, i)
            if m is None:
                toks.append((_PUNCT, i, i + 1))
                i += 1
                continue
            word = m.group(0)
            rest = masked[m.end():].lstrip()
            if is_scalar_token(word):
                kind = _SCALAR
            elif rest.startswith(":"):
                kind = _KEY
            else:
                kind = _WORD
            toks.append((kind, m.start(), m.end()))
            i = m.end()
    return toks


def _comma_description(line: str) -> tuple[str, str]:
    """Description pair for a comma added at the end of ``line``."""
    role = classify_line(line)
    stripped = mask_strings(line).rstrip()
    if stripped and stripped[-1] in CLOSERS:
        return "Missing comma after object/array", "Added comma after object/array"
    if role == LineRole.PROPERTY:
        return "Missing comma after property value", "Added comma after property value"
    return "Missing comma after array element", "Added comma after array element"


# ── Insertion ────────────────────────────────────────────────────────


def _insert_inline_commas(line: str, line_no: int, diagnostics: list[Diagnostic]) -> str:
    toks = _tokens(mask_strings(line))
    gaps: list[tuple[int, int]] = []
    prev: Optional[tuple[str, int, int]] = None
    for tok in toks:
        if prev is not None and prev[0] in _VALUE_END and tok[0] in _VALUE_START:
            gaps.append((prev[2], tok[1]))
        prev = tok

    if not gaps:
        return line

    parts: list[str] = []
    last = 0
    shift = 0
    for gap_start, gap_end in gaps:
        parts.append(line[last:gap_start])
        parts.append(",")
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.MISSING_COMMA,
            line=line_no,
            column=gap_start + shift + 1,
            description="Missing comma between values",
            fix_description="Added comma between values",
        ))
        shift += 1 - (gap_end - gap_start)
        last = gap_end
    parts.append(line[last:])
    return "".join(parts)


def fix_missing_commas(text: str, diagnostics: list[Diagnostic]) -> str:
    """Insert commas between sibling values, within and across lines."""
    lines = text.split("\n")
    lines = [
        _insert_inline_commas(line, idx + 1, diagnostics)
        for idx, line in enumerate(lines)
    ]

    for i, line in enumerate(lines):
        if not line.strip() or ends_with_comma(line) or not ends_with_value(line):
            continue
        j = next_significant(lines, i)
        if j is None or not is_sibling(line, lines[j]):
            continue
        body = line.rstrip()
        description, fix = _comma_description(line)
        lines[i] = body + "," + line[len(body):]
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.MISSING_COMMA,
            line=i + 1,
            column=len(body) + 1,
            description=description,
            fix_description=fix,
        ))

    return "\n".join(lines)


# ── Removal ──────────────────────────────────────────────────────────


def _is_trailing_after_closer(lines: list[str], i: int) -> bool:
    """Decide whether the comma ending a ``},`` / ``],`` line is trailing.

    A next line that is missing or a closer makes it trailing. Otherwise the
    indentation decides: a deeper next line (when this line does not itself
    leave a container open) is not a sibling, so the comma goes.
    """
    line = lines[i]
    j = next_significant(lines, i)
    if j is None:
        return True
    nxt = lines[j]
    if classify_line(nxt) == LineRole.CLOSER:
        return True
    return indent_of(nxt) > indent_of(line) and line_depth_delta(line) <= 0


def fix_trailing_commas(text: str, diagnostics: list[Diagnostic]) -> str:
    """Remove commas that directly precede a closer."""
    lines = text.split("\n")
    for i, line in enumerate(lines):
        if not ends_with_comma(line):
            continue
        body = mask_strings(line).rstrip()[:-1].rstrip()
        if not body or body[-1] not in CLOSERS:
            continue
        if not _is_trailing_after_closer(lines, i):
            continue
        comma_at = mask_strings(line).rstrip().rfind(",")
        lines[i] = line[:comma_at] + line[comma_at + 1:]
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.TRAILING_COMMA,
            line=i + 1,
            column=comma_at + 1,
            description="Trailing comma before closing brace/bracket",
            fix_description="Removed trailing comma",
        ))
    text = "\n".join(lines)

    masked = mask_strings(text)
    positions = [m.start() for m in _TRAILING_COMMA_RE.finditer(masked)]
    if not positions:
        return text
    parts: list[str] = []
    last = 0
    for pos in positions:
        line, col = line_col(text, pos)
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.TRAILING_COMMA,
            line=line,
            column=col,
            description="Trailing comma before closing brace/bracket",
            fix_description="Removed trailing comma",
        ))
        parts.append(text[last:pos])
        last = pos + 1
    parts.append(text[last:])
    return "".join(parts)


def repair_commas(text: str, diagnostics: list[Diagnostic]) -> str:
    """Full comma pass: insertion first, then trailing-comma removal."""
    text = fix_missing_commas(text, diagnostics)
    return fix_trailing_commas(text, diagnostics)
