"""
Bulk actions over a selection of issues.

Unlike single updates, a bulk action writes one shared `bulk_action`
entry per affected issue instead of one entry per changed field.
Ids that do not match an issue are ignored.
"""

from sqlalchemy import insert
from sqlalchemy.orm import Session
from janmitra.database import atomic
from janmitra.exceptions import InvalidAction, EmptySelection
from janmitra.storage import PhotoStorage
from janmitra.domain.model_base import utcnow
from . import models
from typing import Iterable
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class BulkAction(str, Enum):
    MARK_RESOLVED = 'mark_resolved'
    MARK_IN_PROGRESS = 'mark_in_progress'
    SET_HIGH_PRIORITY = 'set_high_priority'
    DELETE = 'delete'

    @classmethod
    def parse(cls, value: "str | BulkAction") -> "BulkAction":
        try:
            return cls(value)
        except ValueError:
            raise InvalidAction(f"Invalid action '{value}'")


BULK_MESSAGES = {
    BulkAction.MARK_RESOLVED: 'Bulk marked as resolved',
    BulkAction.MARK_IN_PROGRESS: 'Bulk marked as in progress',
    BulkAction.SET_HIGH_PRIORITY: 'Bulk set to high priority',
}


def bulk_values(action: BulkAction, now) -> dict:
    values = {models.Issue.updated_at: now}

    if action is BulkAction.MARK_RESOLVED:
        values[models.Issue.status] = models.IssueStatus.RESOLVED.value
        values[models.Issue.resolved_at] = now
    elif action is BulkAction.MARK_IN_PROGRESS:
        values[models.Issue.status] = models.IssueStatus.IN_PROGRESS.value
    elif action is BulkAction.SET_HIGH_PRIORITY:
        values[models.Issue.priority] = 'high'

    return values


def apply_bulk(
    db: Session,
    issue_ids: Iterable[int],
    action: "str | BulkAction",
    acting_user_id: int | None,
    storage: PhotoStorage
) -> int:
    """
    Applies `action` to every existing issue in `issue_ids` as one transaction.

    Returns the number of issues that matched. Any storage failure rolls
    the whole selection back.
    """

    action = BulkAction.parse(action)
    ids = sorted(set(issue_ids))
    if not ids:
        raise EmptySelection()

    if action is BulkAction.DELETE:
        return delete_issues(db, ids, storage)

    now = utcnow()

    with atomic(db):
        matched = [
            issue_id for (issue_id,) in db.query(models.Issue.id)
                                          .filter(models.Issue.id.in_(ids))
                                          .with_for_update()
                                          .all()
        ]

        if matched:
            db.query(models.Issue)\
              .filter(models.Issue.id.in_(matched))\
              .update(bulk_values(action, now), synchronize_session=False)

            db.execute(
                insert(models.IssueUpdate),
                [
                    {
                        'issue_id': issue_id,
                        'update_type': models.UpdateType.BULK_ACTION.value,
                        'message': BULK_MESSAGES[action],
                        'user_id': acting_user_id,
                        'created_at': now
                    }
                    for issue_id in matched
                ]
            )

    logger.info(f"Bulk action {action.value} by user {acting_user_id}: {len(matched)} of {len(ids)} issue(s) affected")
    return len(matched)


def delete_issues(db: Session, ids: list[int], storage: PhotoStorage) -> int:
    with atomic(db):
        matched = db.query(models.Issue.id, models.Issue.photo_path)\
                    .filter(models.Issue.id.in_(ids))\
                    .with_for_update()\
                    .all()
        matched_ids = [issue_id for issue_id, _ in matched]

        if matched_ids:
            db.query(models.IssueUpdate)\
              .filter(models.IssueUpdate.issue_id.in_(matched_ids))\
              .delete(synchronize_session="fetch")
            db.query(models.Issue)\
              .filter(models.Issue.id.in_(matched_ids))\
              .delete(synchronize_session="fetch")

    for _, photo_path in matched:
        if photo_path:
            storage.release(photo_path)

    logger.info(f"Bulk delete: {len(matched_ids)} of {len(ids)} issue(s) removed")
    return len(matched_ids)
