"""
JSON Remediator — heuristic repair of syntactically invalid JSON.

Turns corrupted JSON text (typically a hand-edited package.json) into valid
JSON without a grammar-aware parser. Four passes run in a fixed order:

    1. Quote normalizer   — quote bare-word property keys
    2. Comma repair       — insert missing commas, then strip trailing ones
    3. Escape normalizer  — double backslashes that are not valid escapes
    4. Structure closer   — append missing ``]`` / ``}``

The sequence repeats until the text stops changing (a fixed point) or the
iteration cap is hit, then the result goes through a strict parse. Input that
already parses is returned untouched.

Usage:
    from json_remediator import remediate, remediate_manifest
    outcome = remediate(raw_text)
    # outcome.succeeded         — strict parse of the repaired text passed
    # outcome.repaired_text     — best-effort text, even on failure
    # outcome.diagnostics       — Diagnostic per correction, in order applied
    # outcome.unfixable_reasons — parse failure and/or manifest problems

Every call builds its own diagnostic list; nothing is shared between calls,
so batches can be spread over worker processes freely.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from comma_repair import repair_commas
from escape_normalizer import fix_invalid_escapes
from json_diagnostics import Diagnostic, RepairOutcome
from manifest_checker import check_manifest
from quote_normalizer import fix_missing_quotes
from remediation_config import MAX_ITERATIONS, RemediationConfig, default_config
from structure_closer import fix_malformed_structures

__version__ = "1.0"

logger = logging.getLogger(__name__)

RepairPass = Callable[[str, list[Diagnostic]], str]

# Order matters: commas must see quoted keys, the closer must run last.
PASS_PIPELINE: tuple[tuple[str, RepairPass], ...] = (
    ("quotes", fix_missing_quotes),
    ("commas", repair_commas),
    ("escapes", fix_invalid_escapes),
    ("structure", fix_malformed_structures),
)

_PARSE_HINTS = (
    ("Expecting property name", "Invalid JSON structure - check for missing quotes around property names or malformed objects"),
    ("Expecting ',' delimiter", "Unexpected character found - check for invalid syntax or missing commas"),
    ("Expecting ':' delimiter", "Missing ':' between property name and value"),
    ("Unterminated string", "JSON appears to be truncated - check for unterminated strings"),
    ("Invalid \\escape", "Invalid escape sequence inside a string"),
    ("Extra data", "Unexpected content after the end of the JSON value"),
)


class RemediationError(RuntimeError):
    """Raised when the driver is misused (bad iteration cap); never for malformed input."""


# ── Strict parsing ───────────────────────────────────────────────────


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def strict_parse(text: str) -> Any:
    """Parse ``text`` as strict JSON (NaN/Infinity are rejected).

    Raises:
        ValueError: json.JSONDecodeError for syntax errors, plain ValueError
            for non-standard constants.
    """
    return json.loads(text, parse_constant=_reject_constant)


def describe_parse_error(error: ValueError) -> str:
    """Turn a parser exception into a single unfixable-reason string."""
    if not isinstance(error, json.JSONDecodeError):
        return f"Failed to parse after remediation: {error}"

    hint = error.msg
    # Parser ran out of input before the value was complete
    if not error.doc[error.pos:].strip():
        hint = "JSON appears to be truncated - check for missing values or closing braces/brackets"
    else:
        for prefix, text in _PARSE_HINTS:
            if error.msg.startswith(prefix):
                hint = text
                break
    return f"Failed to parse after remediation: {hint} (line {error.lineno}, column {error.colno})"


# ── Convergence driver ───────────────────────────────────────────────


def run_passes(text: str, diagnostics: list[Diagnostic]) -> str:
    """Run every pass once, in pipeline order."""
    for _name, repair in PASS_PIPELINE:
        text = repair(text, diagnostics)
    return text


def converge(
    text: str,
    diagnostics: list[Diagnostic],
    max_iterations: int = MAX_ITERATIONS,
) -> tuple[str, int, bool]:
    """Repeat the pipeline until the text stops changing.

    Returns (text, iterations_run, reached_fixed_point).
    """
    if not 1 <= max_iterations <= MAX_ITERATIONS:
        raise RemediationError(
            f"iteration cap must be between 1 and {MAX_ITERATIONS}, got {max_iterations}"
        )

    working = text
    for iteration in range(1, max_iterations + 1):
        before = working
        working = run_passes(working, diagnostics)
        logger.debug(
            "iteration %d: %d diagnostics so far, changed=%s",
            iteration, len(diagnostics), working != before,
        )
        if working == before:
            return working, iteration, True

    logger.debug("no fixed point after %d iterations", max_iterations)
    return working, max_iterations, False


def _remediate(text: str, config: RemediationConfig) -> tuple[RepairOutcome, Optional[Any]]:
    """Remediate and also hand back the parsed value (None on failure)."""
    try:
        value = strict_parse(text)
    except ValueError:
        pass
    else:
        return RepairOutcome(succeeded=True, repaired_text=text), value

    diagnostics: list[Diagnostic] = []
    repaired, iterations, converged = converge(text, diagnostics, config.max_iterations)

    try:
        value = strict_parse(repaired)
    except ValueError as e:
        reason = describe_parse_error(e)
        logger.info("remediation failed after %d iteration(s): %s", iterations, reason)
        return RepairOutcome(
            succeeded=False,
            repaired_text=repaired,
            diagnostics=diagnostics,
            unfixable_reasons=[reason],
        ), None

    logger.debug(
        "remediated in %d iteration(s) with %d correction(s), fixed point=%s",
        iterations, len(diagnostics), converged,
    )
    return RepairOutcome(succeeded=True, repaired_text=repaired, diagnostics=diagnostics), value


# ── Main Entry Points ────────────────────────────────────────────────


def remediate(text: str, config: RemediationConfig | None = None) -> RepairOutcome:
    """Repair malformed JSON text.

    Never raises for bad input: a text that cannot be repaired comes back
    with ``succeeded=False``, the best-effort text, and the parse failure in
    ``unfixable_reasons``.
    """
    outcome, _ = _remediate(text, config or default_config())
    return outcome


def remediate_manifest(text: str, config: RemediationConfig | None = None) -> RepairOutcome:
    """Repair a package manifest, then check its identity fields.

    Manifest problems (missing name/version, bad version format) go to
    ``unfixable_reasons`` without touching ``succeeded``, which only reports
    whether the text parses.
    """
    config = config or default_config()
    outcome, value = _remediate(text, config)
    if outcome.succeeded:
        outcome.unfixable_reasons.extend(check_manifest(value, config.manifest))
    return outcome


def fix_json_syntax(text: str) -> str:
    """Repaired text, or the input itself when remediation produced nothing."""
    return remediate(text).repaired_text or text


def fix_package_json(text: str) -> str:
    """Like fix_json_syntax, for package manifests."""
    return remediate_manifest(text).repaired_text or text


# ── CLI ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1:
        with open(sys.argv[1]) as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    result = remediate(text)
    print(result.repaired_text)

    if result.diagnostics:
        print(f"\n--- {len(result.diagnostics)} repairs made ---", file=sys.stderr)
        for d in result.diagnostics:
            print(f"  L{d.line}:{d.column} [{d.kind.value}] {d.description}", file=sys.stderr)
    for reason in result.unfixable_reasons:
        print(f"  UNFIXABLE: {reason}", file=sys.stderr)
