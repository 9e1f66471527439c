#!/usr/bin/env python3
"""
JSON Fixer CLI: repair JSON syntax errors in files.

Usage:
    python json_fixer.py --check package.json
    python json_fixer.py --fix package.json
    python json_fixer.py --fix broken.json -o fixed.json
    python json_fixer.py --all --fix --root ./packages

Options:
    -i, --input FILE     Input JSON file (or give it positionally)
    -o, --output FILE    Output file (defaults to the input file)
    -f, --fix            Write the repaired JSON
    -c, --check          Check only, never write
    -a, --all            Process every manifest (package.json) under --root
    --root DIR           Directory searched by --all (default: .)
    --config FILE        Remediation settings (default: configs/remediation.yaml)
    --json               Print the outcome as JSON
    --verbose / -v       List every correction and debug logging

Files named like a manifest also get the manifest checks (name, version).
Exit status is 1 when a file cannot be repaired or a manifest check fails.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Ensure src/ is importable
_SCRIPT_DIR = Path(__file__).resolve().parent
_SRC_DIR = _SCRIPT_DIR.parent / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from json_diagnostics import RepairOutcome
from json_remediator import remediate, remediate_manifest
from remediation_config import RemediationConfig, load_config

logger = logging.getLogger("json_fixer")


def _print_verbose(outcome: RepairOutcome, path: Path) -> None:
    """Print every correction and unfixable reason for one file."""
    print(f"\nProcessing: {path}")
    print(f"Success: {outcome.succeeded}")

    if outcome.diagnostics:
        print(f"Fixed {len(outcome.diagnostics)} error(s):")
        for d in outcome.diagnostics:
            print(f"  - {d.kind.value}: {d.description} (line {d.line})")
            print(f"    Fix: {d.fix_description}")

    if outcome.unfixable_reasons:
        print("Unfixable errors:")
        for reason in outcome.unfixable_reasons:
            print(f"  - {reason}")
    print()


def _remediate_file(content: str, path: Path, config: RemediationConfig) -> RepairOutcome:
    if config.is_manifest(path):
        return remediate_manifest(content, config)
    return remediate(content, config)


def find_manifests(root: str | Path, config: RemediationConfig) -> list[Path]:
    """All manifest files under ``root``, skipping excluded directories."""
    found: list[Path] = []
    excluded = set(config.exclude_dirs)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for name in sorted(filenames):
            if name in config.manifest_filenames:
                found.append(Path(dirpath) / name)
    return found


def fix_single_file(args: argparse.Namespace, config: RemediationConfig) -> int:
    """Check or fix one file. Returns the exit status."""
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    try:
        content = input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error processing {input_path}: {e}", file=sys.stderr)
        return 1

    outcome = _remediate_file(content, input_path, config)

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    elif args.verbose:
        _print_verbose(outcome, input_path)

    if not outcome.succeeded:
        print(f"✗ {input_path} - Failed to fix JSON", file=sys.stderr)
        for reason in outcome.unfixable_reasons:
            print(f"  - {reason}", file=sys.stderr)
        return 1

    changed = outcome.repaired_text != content
    if args.check or not changed:
        if changed:
            print(f"! {input_path} - Found {len(outcome.diagnostics)} fixable error(s)")
        else:
            print(f"✓ {input_path} - JSON is valid")
    elif args.fix:
        output_path = Path(args.output).resolve() if args.output else input_path
        try:
            output_path.write_text(outcome.repaired_text, encoding="utf-8")
        except OSError as e:
            print(f"Error writing {output_path}: {e}", file=sys.stderr)
            return 1
        print(f"Fixed {input_path} -> {output_path}")
        for d in outcome.diagnostics:
            print(f"  - {d.description} (line {d.line})")
    else:
        print(f"! {input_path} - Found {len(outcome.diagnostics)} fixable error(s)")

    if outcome.unfixable_reasons:
        for reason in outcome.unfixable_reasons:
            print(f"  ! {reason}", file=sys.stderr)
        return 1
    return 0


def fix_all_manifests(args: argparse.Namespace, config: RemediationConfig) -> int:
    """Check or fix every manifest under ``args.root``. Returns the exit status."""
    files = find_manifests(args.root, config)
    if not files:
        print("No manifest files found")
        return 0

    print(f"Found {len(files)} manifest file(s)")

    fixed_count = 0
    error_count = 0
    for path in files:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"✗ Error processing {path}: {e}", file=sys.stderr)
            error_count += 1
            continue

        outcome = remediate_manifest(content, config)
        if args.verbose:
            _print_verbose(outcome, path)

        if not outcome.succeeded:
            print(f"✗ {path} - Failed to fix", file=sys.stderr)
            error_count += 1
            continue

        if outcome.repaired_text != content:
            if args.fix and not args.check:
                try:
                    path.write_text(outcome.repaired_text, encoding="utf-8")
                except OSError as e:
                    print(f"✗ Error writing {path}: {e}", file=sys.stderr)
                    error_count += 1
                    continue
                print(f"Fixed {path} ({len(outcome.diagnostics)} error(s))")
            else:
                print(f"! {path} - {len(outcome.diagnostics)} fixable error(s)")
            fixed_count += 1
        elif args.verbose:
            print(f"✓ {path} - Valid")

        if outcome.unfixable_reasons:
            error_count += 1
            for reason in outcome.unfixable_reasons:
                print(f"  ! {path}: {reason}", file=sys.stderr)

    if args.fix and not args.check:
        print(f"\nSummary: Fixed {fixed_count} files, {error_count} errors")
    else:
        print(f"\nSummary: {fixed_count} files need fixing, {error_count} unfixable errors")
    return 1 if error_count else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-fixer",
        description="Fix common JSON syntax errors (missing/trailing commas, "
                    "unquoted keys, invalid escapes, unclosed objects/arrays)",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="Input JSON file",
    )
    parser.add_argument(
        "-i", "--input",
        type=str,
        default=None,
        help="Input JSON file (alternative to the positional argument)",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (defaults to the input file)",
    )
    parser.add_argument(
        "-f", "--fix",
        action="store_true",
        help="Write the repaired JSON",
    )
    parser.add_argument(
        "-c", "--check",
        action="store_true",
        help="Check only, don't fix",
    )
    parser.add_argument(
        "-a", "--all",
        action="store_true",
        help="Process all manifest files under --root",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=".",
        help="Directory searched by --all (default: .)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Remediation config YAML (default: configs/remediation.yaml)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the remediation outcome as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show every correction and debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.all:
        return fix_all_manifests(args, config)

    args.input = args.input or args.file
    if not args.input:
        print("Error: Input file is required", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    logger.debug("remediating %s (max_iterations=%d)", args.input, config.max_iterations)
    return fix_single_file(args, config)


if __name__ == "__main__":
    sys.exit(main())
