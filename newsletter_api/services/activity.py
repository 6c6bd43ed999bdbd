"""
Activity (audit) log for mutating actions.

Entries are snapshotted while the request still owns the entities and
written from a background task once the response has been sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import structlog
from fastapi import BackgroundTasks

logger = structlog.get_logger()
activity_logger = structlog.get_logger("activity")


@dataclass(frozen=True)
class ActivityEntry:
    entity_type: str
    entity_id: Any
    entity_name: Optional[str]
    action: str
    logged_user: Optional[dict[str, Any]] = None

    @property
    def message(self) -> str:
        return f'{self.entity_type} #{self.entity_id} "{self.entity_name}" {self.action}.'


def build_entry(entity: Any, action: str, logged_user: Any = None) -> ActivityEntry:
    meta = {"id": logged_user.id, "name": logged_user.name} if logged_user is not None else None
    return ActivityEntry(
        entity_type=type(entity).__name__,
        entity_id=entity.id,
        entity_name=getattr(entity, "name", None),
        action=action,
        logged_user=meta,
    )


def write_activity(entry: ActivityEntry) -> None:
    try:
        activity_logger.info(entry.message, logged_user=entry.logged_user)
    except Exception as exc:  # noqa: BLE001
        logger.error("Failed to write activity log", entry=entry.message, error=str(exc))


def log_activity(background_tasks: BackgroundTasks, entity: Any, action: str, logged_user: Any = None) -> None:
    """Schedule an audit line for after the response."""
    background_tasks.add_task(write_activity, build_entry(entity, action, logged_user))
