"""
Protected-table configuration for the meaning insert guard.

Every row written to a protected table must carry a non-null value in each of
its required meaning-reference columns. Optional columns are listed for
documentation and analytics but never enforced.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple

import yaml

from domain.exceptions import ConfigurationError

MEANING_REFERENCE_COLUMN = "meaning_object_id"


@dataclass(frozen=True)
class ProtectedColumn:
    """One meaning-reference column on a protected table."""

    table: str
    column: str = MEANING_REFERENCE_COLUMN
    required: bool = True


DEFAULT_PROTECTED_COLUMNS: Tuple[ProtectedColumn, ...] = (
    ProtectedColumn("tasks"),
    ProtectedColumn("goals"),
    ProtectedColumn("ideas"),
    ProtectedColumn("brain_messages"),
    ProtectedColumn("plans"),
    ProtectedColumn("chat_messages"),
    ProtectedColumn("booking_vendor_profiles"),
    ProtectedColumn("booking_services"),
    ProtectedColumn("booking_service_addons"),
    ProtectedColumn("booking_quote_requests"),
    ProtectedColumn("booking_quotes"),
)


class ProtectedTableConfig:
    """Lookup view over a static tuple of ProtectedColumn entries."""

    def __init__(self, columns: Iterable[ProtectedColumn] = DEFAULT_PROTECTED_COLUMNS, warn_on_missing_optional=False):
        self.columns: Tuple[ProtectedColumn, ...] = tuple(columns)
        self.warn_on_missing_optional = warn_on_missing_optional
        self._tables = frozenset(c.table for c in self.columns)

    def is_protected(self, table: str) -> bool:
        return table in self._tables

    def required_columns(self, table: str) -> Tuple[str, ...]:
        return tuple(c.column for c in self.columns if c.table == table and c.required)

    def optional_columns(self, table: str) -> Tuple[str, ...]:
        return tuple(c.column for c in self.columns if c.table == table and not c.required)

    @property
    def tables(self) -> frozenset:
        return self._tables

    def __repr__(self) -> str:
        return f"ProtectedTableConfig(tables={sorted(self._tables)})"


def load_protected_tables(path: Path, warn_on_missing_optional: bool = False) -> ProtectedTableConfig:
    """
    Load a protected-table configuration from YAML.

    Expected format:

        tables:
          tasks:
            - column: meaning_object_id
            - column: goal_meaning_id
              required: false
          goals: [meaning_object_id]

    A bare string entry is shorthand for a required column.

    Args:
        path: Path to the YAML file
        warn_on_missing_optional: Passed through to the resulting config

    Returns:
        ProtectedTableConfig built from the file

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read protected tables from {path}: {e}")

    tables = data.get("tables") if isinstance(data, dict) else None
    if not isinstance(tables, dict):
        raise ConfigurationError(f"{path}: top-level 'tables' mapping is required")

    columns = []
    for table, entries in tables.items():
        if not isinstance(entries, list) or not entries:
            raise ConfigurationError(f"{path}: table '{table}' must list at least one column")
        for entry in entries:
            if isinstance(entry, str):
                columns.append(ProtectedColumn(table=str(table), column=entry))
            elif isinstance(entry, dict) and isinstance(entry.get("column"), str):
                required = entry.get("required", True)
                if not isinstance(required, bool):
                    raise ConfigurationError(f"{path}: '{table}.{entry['column']}' required must be a boolean")
                columns.append(ProtectedColumn(table=str(table), column=entry["column"], required=required))
            else:
                raise ConfigurationError(f"{path}: invalid column entry for table '{table}': {entry!r}")

    return ProtectedTableConfig(columns, warn_on_missing_optional=warn_on_missing_optional)
