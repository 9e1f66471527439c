"""Centralized path resolution for the JSON remediation tools.

All modules should import paths from here rather than computing them locally.
This module resolves paths relative to the project root (parent of src/).
"""

from __future__ import annotations

from pathlib import Path

# Project root: parent of the src/ directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Core directories
SRC_DIR = PROJECT_ROOT / "src"
CLI_DIR = PROJECT_ROOT / "cli"
TESTS_DIR = PROJECT_ROOT / "tests"
CONFIGS_DIR = PROJECT_ROOT / "configs"

# Remediation settings (iteration cap, manifest rules, batch discovery)
REMEDIATION_CONFIG_PATH = CONFIGS_DIR / "remediation.yaml"
