"""Agenda items: ordering, one-level nesting and progress tracking."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from council.models import AGENDA_STATUS_ORDER, AgendaItem, AgendaItemStatus, utcnow
from council.schemas.agenda import AgendaItemCreate, AgendaItemUpdate
from council.services.meetings import get_meeting

logger = logging.getLogger(__name__)


class AgendaError(RuntimeError):
    """Base exception for agenda operations."""


class AgendaItemNotFoundError(AgendaError):
    """Raised when an agenda item identifier does not exist."""


class InvalidParentError(AgendaError):
    """Raised when a parent assignment would break the one-level nesting rule."""


class AgendaCycleError(AgendaError):
    """Raised when stored parent links form a loop."""


class InvalidAgendaTransitionError(AgendaError):
    """Raised when an item's status would move backwards."""


@dataclass(slots=True)
class AgendaNode:
    item: AgendaItem
    subsections: list[AgendaItem] = field(default_factory=list)


def get_agenda_item(session: Session, item_id: int) -> AgendaItem:
    item = session.get(AgendaItem, item_id)
    if item is None:
        raise AgendaItemNotFoundError(f"Agenda item {item_id} not found")
    return item


def list_agenda_items(session: Session, meeting_id: int) -> list[AgendaItem]:
    get_meeting(session, meeting_id)
    statement = (
        select(AgendaItem)
        .where(AgendaItem.meeting_id == meeting_id)
        .order_by(AgendaItem.order_index, AgendaItem.id)
    )
    return list(session.scalars(statement))


def build_agenda_tree(items: Iterable[AgendaItem]) -> list[AgendaNode]:
    """Group sub-items under their top-level ancestor, preserving input order.

    Items whose parent is missing from ``items`` are shown at the top level.
    """

    ordered = list(items)
    by_id = {item.id: item for item in ordered}

    def root_of(item: AgendaItem) -> AgendaItem:
        seen = {item.id}
        current = item
        while current.parent_id is not None and current.parent_id in by_id:
            current = by_id[current.parent_id]
            if current.id in seen:
                raise AgendaCycleError(f"Agenda item {item.id} is part of a parent cycle")
            seen.add(current.id)
        return current

    nodes: dict[int, AgendaNode] = {}
    roots: dict[int, AgendaItem] = {item.id: root_of(item) for item in ordered}
    for item in ordered:
        if roots[item.id].id == item.id:
            nodes[item.id] = AgendaNode(item=item)
    for item in ordered:
        root = roots[item.id]
        if root.id != item.id:
            nodes[root.id].subsections.append(item)
    return list(nodes.values())


def _validate_parent(session: Session, *, meeting_id: int, parent_id: int, item: AgendaItem | None) -> None:
    if item is not None and parent_id == item.id:
        raise InvalidParentError("An agenda item cannot be its own parent")
    parent = session.get(AgendaItem, parent_id)
    if parent is None:
        raise AgendaItemNotFoundError(f"Parent agenda item {parent_id} not found")
    if parent.meeting_id != meeting_id:
        raise InvalidParentError("Parent agenda item belongs to another meeting")
    if parent.parent_id is not None:
        raise InvalidParentError("Sub-items cannot be nested further")
    if item is not None and item.subsections:
        raise InvalidParentError("An item with sub-items cannot become a sub-item")


def create_agenda_item(session: Session, meeting_id: int, payload: AgendaItemCreate) -> AgendaItem:
    get_meeting(session, meeting_id)
    if payload.parent_id is not None:
        _validate_parent(session, meeting_id=meeting_id, parent_id=payload.parent_id, item=None)
    item = AgendaItem(meeting_id=meeting_id, **payload.model_dump())
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def apply_status(item: AgendaItem, target: AgendaItemStatus) -> None:
    current = item.status
    if AGENDA_STATUS_ORDER.index(target) < AGENDA_STATUS_ORDER.index(current):
        raise InvalidAgendaTransitionError(
            f"Cannot move agenda item from {current.value} back to {target.value}"
        )
    if target == current:
        return
    now = utcnow()
    if target in (AgendaItemStatus.IN_PROGRESS, AgendaItemStatus.COMPLETED) and item.started_at is None:
        item.started_at = now
    if target == AgendaItemStatus.COMPLETED:
        item.completed_at = now
    item.status = target


def update_agenda_item(session: Session, item_id: int, payload: AgendaItemUpdate) -> AgendaItem:
    item = get_agenda_item(session, item_id)
    changes = payload.model_dump(exclude_unset=True)

    if "parent_id" in changes and changes["parent_id"] != item.parent_id:
        parent_id = changes["parent_id"]
        if parent_id is not None:
            _validate_parent(session, meeting_id=item.meeting_id, parent_id=parent_id, item=item)
        item.parent_id = parent_id
    changes.pop("parent_id", None)

    target_status = changes.pop("status", None)
    if target_status is not None:
        apply_status(item, target_status)

    for field_name, value in changes.items():
        if value is None and field_name in {"title", "duration", "type", "order_index"}:
            continue
        setattr(item, field_name, value)
    session.commit()
    session.refresh(item)
    return item


def update_content(session: Session, item_id: int, content: str) -> AgendaItem:
    item = get_agenda_item(session, item_id)
    item.content = content
    session.commit()
    session.refresh(item)
    return item


def delete_agenda_item(session: Session, item_id: int) -> None:
    item = get_agenda_item(session, item_id)
    session.delete(item)
    session.commit()
    logger.info("agenda item deleted", extra={"agenda_item_id": item_id})


__all__ = [
    "AgendaCycleError",
    "AgendaError",
    "AgendaItemNotFoundError",
    "AgendaNode",
    "InvalidAgendaTransitionError",
    "InvalidParentError",
    "apply_status",
    "build_agenda_tree",
    "create_agenda_item",
    "delete_agenda_item",
    "get_agenda_item",
    "list_agenda_items",
    "update_agenda_item",
    "update_content",
]
