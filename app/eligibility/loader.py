"""YAML threshold table loader with integrity hashing."""

import hashlib
from pathlib import Path
from typing import Any

import yaml

from app.core.config import DEFAULT_THRESHOLDS_DIR
from app.eligibility.errors import ConfigurationError


def compute_table_hash(content: str) -> str:
    """Compute SHA256 hash of threshold table content.

    Recorded with every evaluation so an assessment can be traced back to
    the exact published figures.

    Args:
        content: Raw YAML content string

    Returns:
        SHA256 hex digest
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def load_threshold_file(
    filename: str,
    thresholds_dir: Path | None = None,
) -> tuple[dict[str, Any], str]:
    """Load a threshold table YAML file and compute its hash.

    Args:
        filename: Name of the table file (e.g., "ut-2025-01.yaml")
        thresholds_dir: Directory containing tables (defaults to /thresholds)

    Returns:
        Tuple of (parsed table dict, SHA256 hash)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the YAML is invalid or not a mapping
    """
    if thresholds_dir is None:
        thresholds_dir = DEFAULT_THRESHOLDS_DIR

    filepath = thresholds_dir / filename

    if not filepath.exists():
        raise FileNotFoundError(f"Threshold table not found: {filepath}")

    content = filepath.read_text(encoding="utf-8")
    table_hash = compute_table_hash(content)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in threshold table {filename}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Threshold table {filename} must be a mapping")

    return data, table_hash


def list_threshold_files(
    thresholds_dir: Path | None = None,
    jurisdiction: str | None = None,
) -> list[str]:
    """List table files in a directory, optionally for one jurisdiction.

    Files are named ``<jurisdiction>-<yyyy>-<mm>.yaml`` in lower case.
    """
    directory = thresholds_dir or DEFAULT_THRESHOLDS_DIR
    pattern = f"{jurisdiction.lower()}-*.yaml" if jurisdiction else "*.yaml"
    return sorted(f.name for f in directory.glob(pattern))
