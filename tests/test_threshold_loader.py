"""Tests for threshold table loading and integrity hashing."""

from pathlib import Path

import pytest

from app.eligibility.errors import ConfigurationError
from app.eligibility.loader import (
    compute_table_hash,
    list_threshold_files,
    load_threshold_file,
)

TABLE_FILE = "ut-2025-01.yaml"


class TestThresholdFiles:
    """Tests for reading threshold table files."""

    def test_load_returns_dict_and_hash(self) -> None:
        """Test that load_threshold_file returns both table dict and hash."""
        table, table_hash = load_threshold_file(TABLE_FILE)

        assert isinstance(table, dict)
        assert isinstance(table_hash, str)
        assert len(table_hash) == 64  # SHA256 hex is 64 chars

    def test_table_has_required_fields(self) -> None:
        """Test that the shipped table has the fields evaluation needs."""
        table, _ = load_threshold_file(TABLE_FILE)

        for key in (
            "id",
            "jurisdiction",
            "version",
            "effective_from",
            "effective_to",
            "median_income_by_size",
            "additional_person_income",
            "disposable_income_ratio",
            "exemptions",
        ):
            assert key in table

    def test_compute_hash_is_deterministic(self) -> None:
        """Test that hash computation is deterministic."""
        content = "median_income_by_size: {1: 85644}"

        assert compute_table_hash(content) == compute_table_hash(content)

    def test_different_content_produces_different_hash(self) -> None:
        """Test that a changed figure changes the hash."""
        hash1 = compute_table_hash("median_income_by_size: {1: 85644}")
        hash2 = compute_table_hash("median_income_by_size: {1: 85645}")

        assert hash1 != hash2

    def test_list_tables_for_jurisdiction(self) -> None:
        """Test listing tables filtered by jurisdiction."""
        assert list_threshold_files(jurisdiction="UT") == ["ut-2024-11.yaml", "ut-2025-01.yaml"]
        assert list_threshold_files(jurisdiction="NV") == []

    def test_list_tables_in_other_directory(self, tmp_path: Path) -> None:
        """Test listing reads the given directory and ignores other files."""
        (tmp_path / "ut-2026-01.yaml").write_text("id: ut-2026-01\n")
        (tmp_path / "notes.txt").write_text("draft")

        assert list_threshold_files(tmp_path) == ["ut-2026-01.yaml"]

    def test_missing_file_raises(self) -> None:
        """Test that a missing table file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_threshold_file("ut-1999-01.yaml")

    def test_invalid_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        """Test that unparseable YAML is a configuration error."""
        (tmp_path / "ut-bad.yaml").write_text("median_income_by_size: [1, 2\n")

        with pytest.raises(ConfigurationError):
            load_threshold_file("ut-bad.yaml", tmp_path)

    def test_non_mapping_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        """Test that a YAML list instead of a mapping is rejected."""
        (tmp_path / "ut-list.yaml").write_text("- 1\n- 2\n")

        with pytest.raises(ConfigurationError):
            load_threshold_file("ut-list.yaml", tmp_path)
