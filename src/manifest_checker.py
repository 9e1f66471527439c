"""
Semantic checks for package manifests (package.json).

Runs on an already parsed value, never on raw text. Every check runs and
every failure is reported; none of them is auto-corrected.

Usage:
    from manifest_checker import check_manifest
    reasons = check_manifest({"name": "x"})
    # ["Missing required field: version"]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

MISSING_FIELD_MESSAGE = "Missing required field: {field}"
INVALID_VERSION_MESSAGE = "Invalid version format. Expected semantic version (e.g., 1.0.0)"


@dataclass(frozen=True)
class ManifestConstraint:
    """Static rule set for manifest identity fields."""

    required_fields: tuple[str, ...] = ("name", "version")
    version_pattern: str = r"^\d+\.\d+\.\d+"  # pre-release/build suffixes allowed
    version_field: str = "version"

    def version_matches(self, version: Any) -> bool:
        return isinstance(version, str) and re.match(self.version_pattern, version) is not None


DEFAULT_CONSTRAINT = ManifestConstraint()


def _present(value: Any) -> bool:
    # null, "", false and 0 all count as absent
    if value is None or value is False or value == "":
        return False
    return not (isinstance(value, (int, float)) and value == 0)


def check_manifest(manifest: Any, constraint: ManifestConstraint = DEFAULT_CONSTRAINT) -> list[str]:
    """Return the unfixable reasons for a parsed manifest (empty when valid).

    A manifest that is not a JSON object has none of the required fields.
    """
    fields = manifest if isinstance(manifest, dict) else {}
    reasons: list[str] = []

    for name in constraint.required_fields:
        if not _present(fields.get(name)):
            reasons.append(MISSING_FIELD_MESSAGE.format(field=name))

    version = fields.get(constraint.version_field)
    if _present(version) and not constraint.version_matches(version):
        reasons.append(INVALID_VERSION_MESSAGE)

    return reasons
