"""Remediation settings loader.

Loads the iteration cap, manifest rules and batch-discovery settings from
configs/remediation.yaml. The core entry points fall back to
default_config(), which needs no file, so remediation itself does no I/O.

Usage:
    from remediation_config import load_config, default_config

    config = load_config()                   # configs/remediation.yaml
    config = load_config("my_rules.yaml")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from manifest_checker import ManifestConstraint
from paths import REMEDIATION_CONFIG_PATH

# Hard cap on pipeline iterations; configs may lower it, never raise it.
MAX_ITERATIONS = 5


@dataclass
class RemediationConfig:
    """Complete parsed configuration."""
    max_iterations: int = MAX_ITERATIONS
    manifest: ManifestConstraint = field(default_factory=ManifestConstraint)
    manifest_filenames: list[str] = field(default_factory=lambda: ["package.json"])
    exclude_dirs: list[str] = field(
        default_factory=lambda: ["node_modules", "third_party", ".git"]
    )

    def is_manifest(self, path: str | Path) -> bool:
        """Whether ``path`` names a manifest file."""
        return Path(path).name in self.manifest_filenames


def default_config() -> RemediationConfig:
    """Built-in settings, identical to the shipped YAML."""
    return RemediationConfig()


def _parse_names(raw: dict, key: str, default: list[str], path: Path) -> list[str]:
    names = raw.get(key, default)
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ValueError(f"Invalid remediation config: '{key}' must be a list of names in {path}")
    return list(names)


def _parse_manifest(raw: Any, path: Path) -> ManifestConstraint:
    if raw is None:
        return ManifestConstraint()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid remediation config: 'manifest' must be a mapping in {path}")

    required = raw.get("required_fields", ["name", "version"])
    if not isinstance(required, list) or not all(isinstance(f, str) for f in required):
        raise ValueError(f"Invalid remediation config: 'required_fields' must be a list of names in {path}")

    pattern = raw.get("version_pattern", ManifestConstraint.version_pattern)
    try:
        re.compile(pattern)
    except (re.error, TypeError) as e:
        raise ValueError(f"Invalid version_pattern {pattern!r} in {path}: {e}") from e

    return ManifestConstraint(required_fields=tuple(required), version_pattern=pattern)


def load_config(config_path: str | Path | None = None) -> RemediationConfig:
    """Load remediation settings from YAML.

    Args:
        config_path: Path to config file. Defaults to configs/remediation.yaml.

    Returns:
        RemediationConfig with all settings; absent keys keep their defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is malformed.
    """
    path = Path(config_path) if config_path else REMEDIATION_CONFIG_PATH

    if not path.exists():
        raise FileNotFoundError(f"Remediation config not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid remediation config: expected a mapping in {path}")

    max_iterations = raw.get("max_iterations", MAX_ITERATIONS)
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int):
        raise ValueError(f"Invalid max_iterations {max_iterations!r} in {path}")
    if not 1 <= max_iterations <= MAX_ITERATIONS:
        raise ValueError(
            f"max_iterations must be between 1 and {MAX_ITERATIONS}, got {max_iterations}"
        )

    defaults = RemediationConfig()
    return RemediationConfig(
        max_iterations=max_iterations,
        manifest=_parse_manifest(raw.get("manifest"), path),
        manifest_filenames=_parse_names(raw, "manifest_filenames", defaults.manifest_filenames, path),
        exclude_dirs=_parse_names(raw, "exclude_dirs", defaults.exclude_dirs, path),
    )


# ---------------------------------------------------------------------------
# Self-test
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    config = load_config()
    print(f"Loaded remediation config from {REMEDIATION_CONFIG_PATH}")
    print(f"  max_iterations: {config.max_iterations}")
    print(f"  required fields: {', '.join(config.manifest.required_fields)}")
    print(f"  version pattern: {config.manifest.version_pattern}")
    print(f"  manifests: {config.manifest_filenames}  exclude: {config.exclude_dirs}")
