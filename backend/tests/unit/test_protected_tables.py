"""
Unit tests for the protected-table configuration.

Tests the built-in table list and loading overrides from YAML.
"""

import pytest
from domain.exceptions import ConfigurationError
from domain.value_objects.protected_tables import (
    DEFAULT_PROTECTED_COLUMNS,
    ProtectedColumn,
    ProtectedTableConfig,
    load_protected_tables,
)


class TestProtectedTableConfig:
    """Tests for ProtectedTableConfig lookups."""

    @pytest.mark.unit
    def test_default_tables(self):
        """The built-in list covers content and booking tables."""
        config = ProtectedTableConfig()

        assert len(DEFAULT_PROTECTED_COLUMNS) == 11
        for table in ("tasks", "goals", "ideas", "brain_messages", "plans", "chat_messages", "booking_quotes"):
            assert config.is_protected(table)
        assert not config.is_protected("meaning_objects")

    @pytest.mark.unit
    def test_required_and_optional_columns(self):
        config = ProtectedTableConfig(
            [
                ProtectedColumn("tasks"),
                ProtectedColumn("tasks", "goal_meaning_id", required=False),
            ]
        )

        assert config.required_columns("tasks") == ("meaning_object_id",)
        assert config.optional_columns("tasks") == ("goal_meaning_id",)
        assert config.required_columns("goals") == ()
        assert config.tables == frozenset({"tasks"})


class TestLoadProtectedTables:
    """Tests for load_protected_tables()."""

    @pytest.mark.unit
    def test_load_from_yaml(self, protected_tables_yaml):
        config = load_protected_tables(protected_tables_yaml, warn_on_missing_optional=True)

        assert config.tables == frozenset({"tasks", "notes"})
        assert config.required_columns("tasks") == ("meaning_object_id",)
        assert config.optional_columns("tasks") == ("goal_meaning_id",)
        assert config.required_columns("notes") == ("meaning_object_id",)
        assert config.warn_on_missing_optional is True

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot read"):
            load_protected_tables(tmp_path / "missing.yaml")

    @pytest.mark.unit
    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("tables: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_protected_tables(path)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "content",
        [
            "",
            "tables: 3\n",
            "tables:\n  tasks: []\n",
            "tables:\n  tasks:\n    - 42\n",
            "tables:\n  tasks:\n    - column: meaning_object_id\n      required: sometimes\n",
        ],
    )
    def test_malformed_content(self, tmp_path, content):
        """Structural problems are reported as configuration errors."""
        path = tmp_path / "protected_tables.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_protected_tables(path)
