"""
Literal/structure scanner for line-oriented JSON repair.

Light-weight pattern matching over single lines: what role a line plays
(property, array element, container opener, closer) and whether the next
non-empty line is a sibling of it. Nothing here keeps state between calls.

String literals are located with JSON escape rules. A newline always ends a
string (JSON strings cannot contain raw newlines), so a line can be scanned
without knowing anything about the lines before it.

Usage:
    from json_scanner import classify_line, is_sibling, mask_strings, LineRole
    classify_line('  "name": "pkg",')   # LineRole.PROPERTY
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

# Fill character for masked string contents; never part of JSON syntax.
MASK_CHAR = "#"

OPENERS = "{["
CLOSERS = "}]"

# Scalar tokens as they appear after masking
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_LITERAL_RE = re.compile(r"true|false|null")
_ELEMENT_RE = re.compile(
    r'^(?:"[^"]*"|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null)$'
)
_VALUE_TAIL_RE = re.compile(
    r'(?:"|[}\]]|(?<![\w.$#])(?:true|false|null|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?))$'
)


class LineRole(str, Enum):
    """Structural role of a single line."""

    EMPTY = "empty"
    CLOSER = "closer"
    OPENER = "opener"
    PROPERTY = "property"
    ELEMENT = "element"
    OTHER = "other"


# ── String literals ─────────────────────────────────────────────────


def string_spans(text: str) -> tuple[list[tuple[int, int, bool]], bool]:
    """Locate string literals in ``text``.

    Returns (spans, open_at_end). Each span is (start, end, closed) with
    ``start`` at the opening quote and ``end`` one past the closing quote.
    A string cut off by a newline or by the end of the text ends there;
    ``open_at_end`` is True when the text itself ends inside a string.
    """
    spans: list[tuple[int, int, bool]] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] != '"':
            i += 1
            continue
        start = i
        i += 1
        closed = False
        while i < n:
            ch = text[i]
            if ch == "\\" and i + 1 < n and text[i + 1] != "\n":
                i += 2
                continue
            if ch == "\n":
                break
            i += 1
            if ch == '"':
                closed = True
                break
        spans.append((start, i, closed))
        if not closed and i >= n:
            return spans, True
    return spans, False


def mask_strings(text: str) -> str:
    """Blank out string contents, keeping quotes and overall length.

    Structural regexes run on the masked text never match inside a string
    literal, and offsets stay valid for the original text.
    """
    spans, _ = string_spans(text)
    if not spans:
        return text
    parts: list[str] = []
    prev = 0
    for start, end, closed in spans:
        inner_end = end - 1 if closed else end
        parts.append(text[prev:start + 1])
        parts.append(MASK_CHAR * (inner_end - start - 1))
        prev = inner_end
    parts.append(text[prev:])
    return "".join(parts)


def ends_in_open_string(text: str) -> bool:
    return string_spans(text)[1]


# ── Line geometry ────────────────────────────────────────────────────


def indent_of(line: str) -> int:
    """Width of the leading whitespace of ``line``."""
    return len(line) - len(line.lstrip())


def line_depth_delta(line: str) -> int:
    """Openers minus closers on ``line``, ignoring string contents."""
    masked = mask_strings(line)
    return sum(masked.count(c) for c in OPENERS) - sum(masked.count(c) for c in CLOSERS)


def next_significant(lines: list[str], index: int) -> Optional[int]:
    """Index of the first non-blank line after ``index``, or None."""
    for j in range(index + 1, len(lines)):
        if lines[j].strip():
            return j
    return None


# ── Classification ───────────────────────────────────────────────────


def classify_line(line: str) -> LineRole:
    """Classify a line by its structural shape."""
    s = mask_strings(line).strip()
    if not s:
        return LineRole.EMPTY
    if s[0] in CLOSERS:
        return LineRole.CLOSER
    body = s.rstrip(",").rstrip()
    if body and body[-1] in OPENERS:
        return LineRole.OPENER
    if ":" in body:
        return LineRole.PROPERTY
    if _ELEMENT_RE.match(body):
        return LineRole.ELEMENT
    if body and body[0] in OPENERS:
        # inline object/array element such as [1, 2]
        return LineRole.ELEMENT
    return LineRole.OTHER


def ends_with_value(line: str) -> bool:
    """True when the line's last token completes a value (or a closer)."""
    s = mask_strings(line).rstrip()
    return bool(s) and _VALUE_TAIL_RE.search(s) is not None


def ends_with_comma(line: str) -> bool:
    return mask_strings(line).rstrip().endswith(",")


def is_sibling(line: str, next_line: str) -> bool:
    """Whether ``next_line`` starts a value at the same depth as ``line`` ends one.

    The next line must look like a property, an array element or an opener,
    and must not be indented deeper than ``line``, unless ``line`` itself
    leaves a container open (``{"name": "x"`` followed by an indented
    property).
    """
    if classify_line(next_line) not in (LineRole.PROPERTY, LineRole.ELEMENT, LineRole.OPENER):
        return False
    if indent_of(next_line) <= indent_of(line):
        return True
    return line_depth_delta(line) > 0


def is_scalar_token(token: str) -> bool:
    """A bare (unquoted) token that is a complete JSON value."""
    return bool(_NUMBER_RE.fullmatch(token) or _LITERAL_RE.fullmatch(token))
