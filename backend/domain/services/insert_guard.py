"""
Meaning insert guard.

Last line of defense for the meaning-first rule: no row lands in a protected
table without a meaning_object_id. Primary validation happens when the meaning
object is built; this guard catches code paths that bypass authoring.

guard_insert() is a pure predicate over in-memory rows. attach_insert_guard()
wires it into SQLAlchemy so ORM inserts are checked at flush time.
"""

import json
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from sqlalchemy import event, inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from domain.exceptions import MeaningGuardError
from domain.value_objects.protected_tables import ProtectedTableConfig

logger = logging.getLogger("MeaningGuard")

_default_config = ProtectedTableConfig()

ROW_PREVIEW_LENGTH = 200


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _preview(row: Mapping[str, Any]) -> str:
    return json.dumps(dict(row), indent=2, default=str)[:ROW_PREVIEW_LENGTH]


def guard_insert(
    table: str,
    rows: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
    block: bool = True,
    config: Optional[ProtectedTableConfig] = None,
) -> bool:
    """
    Validate that rows bound for a protected table carry their meaning references.

    Args:
        table: The table being inserted into
        rows: A single row mapping or a batch of row mappings
        block: If True, raise on violation; otherwise log a warning and return False
        config: Protected-table configuration (defaults to the built-in table list)

    Returns:
        True if the insert may proceed, False if a violation was logged (non-blocking mode)

    Raises:
        MeaningGuardError: On violation in blocking mode
    """
    config = config or _default_config
    if not config.is_protected(table):
        return True

    batch = [rows] if isinstance(rows, Mapping) else list(rows)
    required = config.required_columns(table)
    optional = config.optional_columns(table)

    for row in batch:
        for column in required:
            if not _is_missing(row.get(column)):
                continue

            message = (
                f'Insert into "{table}" without {column}. '
                f"This violates the Meaning-First rule. Payload: {_preview(row)}"
            )
            if block:
                logger.error(message)
                raise MeaningGuardError(table, column)

            logger.warning(message)
            return False

        if config.warn_on_missing_optional:
            for column in optional:
                if _is_missing(row.get(column)):
                    logger.info(f'Insert into "{table}" without optional {column}')

    return True


def _row_values(instance: Any) -> dict:
    """Column values of a pending ORM instance keyed by column name."""
    mapper = inspect(instance).mapper
    return {attr.columns[0].name: getattr(instance, attr.key) for attr in mapper.column_attrs}


def attach_insert_guard(
    session: Union[Session, AsyncSession],
    block: bool = True,
    config: Optional[ProtectedTableConfig] = None,
) -> None:
    """
    Register a before_flush hook that guards every pending insert on the session.

    In blocking mode a violation raises MeaningGuardError from flush/commit and
    nothing is written.

    Args:
        session: Sync or async SQLAlchemy session
        block: Passed to guard_insert
        config: Protected-table configuration
    """
    target = session.sync_session if isinstance(session, AsyncSession) else session

    def _before_flush(flush_session, flush_context, instances):
        for instance in flush_session.new:
            table = getattr(instance, "__tablename__", None)
            if table is None:
                continue
            guard_insert(table, _row_values(instance), block=block, config=config)

    event.listen(target, "before_flush", _before_flush)
    logger.debug(f"Insert guard attached (block={block})")
