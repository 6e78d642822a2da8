"""Tests for YAML run settings."""

import pytest

from ig_summary.constants import ColumnNames
from ig_summary.domain.entities.settings import DataDictionaryMode
from ig_summary.infrastructure.io.exceptions import DataSourceNotFoundError, SettingsError
from ig_summary.infrastructure.repositories import SettingsLoader

SUMMARY_SETTINGS = """\
mode: all
title: My Data Dictionary
codeSystems:
  http://loinc.org: LOINC
excludeElement:
  - Patient.telecom
"""

DIFF_SETTINGS = f"""\
leftName: STU1
rightName: STU2
remapValues:
  - column: {ColumnNames.SOURCE_PROFILE_URI}
    old: http://example.org/old
    new: http://example.org/new
notes:
  - note: Renamed in STU2
    appearBy:
      - "{ColumnNames.FHIR_ELEMENT}": Patient.gender
"""


def write(tmp_path, text, name="settings.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestSummarySettings:
    """Tests for SettingsLoader.load_summary_settings."""

    def test_no_file_means_defaults(self):
        settings = SettingsLoader().load_summary_settings(None)

        assert settings.mode is DataDictionaryMode.MUST_SUPPORT
        assert settings.title is None

    def test_reads_yaml(self, tmp_path):
        settings = SettingsLoader().load_summary_settings(write(tmp_path, SUMMARY_SETTINGS))

        assert settings.mode is DataDictionaryMode.ALL
        assert settings.title == "My Data Dictionary"
        assert settings.code_system_name("http://loinc.org") == "LOINC"
        assert settings.exclude_element == ("Patient.telecom",)

    def test_mode_precedence(self, tmp_path):
        """Caller first, then the file, then the configured default."""
        path = write(tmp_path, SUMMARY_SETTINGS)
        loader = SettingsLoader(default_mode=DataDictionaryMode.ALL)

        assert (
            loader.load_summary_settings(path, DataDictionaryMode.MUST_SUPPORT).mode
            is DataDictionaryMode.MUST_SUPPORT
        )
        assert loader.load_summary_settings(None).mode is DataDictionaryMode.ALL
        assert (
            SettingsLoader(default_mode=DataDictionaryMode.MUST_SUPPORT)
            .load_summary_settings(path)
            .mode
            is DataDictionaryMode.ALL
        )

    def test_empty_file(self, tmp_path):
        settings = SettingsLoader().load_summary_settings(write(tmp_path, ""))

        assert settings.mode is DataDictionaryMode.MUST_SUPPORT

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataSourceNotFoundError, match="does not exist"):
            SettingsLoader().load_summary_settings(tmp_path / "missing.yaml")

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(SettingsError, match="mapping at the top level"):
            SettingsLoader().load_summary_settings(write(tmp_path, "- a\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(SettingsError, match="Failed to parse"):
            SettingsLoader().load_summary_settings(write(tmp_path, "mode: [unclosed\n"))

    def test_invalid_mode(self, tmp_path):
        with pytest.raises(SettingsError, match="mode must be one of"):
            SettingsLoader().load_summary_settings(write(tmp_path, "mode: some\n"))


class TestDiffSettings:
    """Tests for SettingsLoader.load_diff_settings."""

    def test_reads_yaml(self, tmp_path):
        settings = SettingsLoader().load_diff_settings(write(tmp_path, DIFF_SETTINGS))

        assert settings.left_name == "STU1"
        assert settings.right_name == "STU2"
        assert settings.remapped_profile_url("http://example.org/old") == (
            "http://example.org/new"
        )
        assert settings.notes[0].appear_by == (
            {ColumnNames.FHIR_ELEMENT: "Patient.gender"},
        )

    def test_no_file_means_defaults(self):
        assert SettingsLoader().load_diff_settings(None).left_name == "Left"

    def test_missing_rule_key(self, tmp_path):
        path = write(tmp_path, "remapValues:\n  - column: Data Type\n")

        with pytest.raises(SettingsError, match="missing key"):
            SettingsLoader().load_diff_settings(path)

    def test_yaml_booleans_match_cell_text(self, tmp_path):
        """Unquoted true/false compare equal to the lower-case cell values."""
        path = write(
            tmp_path,
            f'suppressRows:\n  - "{ColumnNames.USED_BY_MEASURE}": true\n'
            "remapValues:\n"
            f"  - column: {ColumnNames.USED_BY_MEASURE}\n"
            "    old: false\n"
            "    new: true\n",
        )

        settings = SettingsLoader().load_diff_settings(path)

        assert settings.suppress_rows == ({ColumnNames.USED_BY_MEASURE: "true"},)
        assert settings.remap_values[0].old == "false"
        assert settings.remap_values[0].new == "true"
