"""
Single-issue state changes.

Status may move between any two states, what this module guarantees is
that every change is recorded: each supplied field appends its own audit
entry, attributed to the acting user, in the same transaction as the
update itself. Concurrent edits are last-write-wins, the audit log shows
both.
"""

from sqlalchemy.orm import Session
from janmitra.database import atomic
from janmitra.exceptions import NotFound
from janmitra.domain.model_base import utcnow
from janmitra.domain.volunteer.models import Volunteer
from . import models, schemas
import logging

logger = logging.getLogger(__name__)


def describe_changes(changes: schemas.IssueChanges) -> tuple[dict, list[tuple[models.UpdateType, str]]]:
    """
    Translates a partial update into column values and audit notes.

    Returns `(values, notes)` where notes is one `(update_type, message)`
    per supplied field.
    """

    values = {}
    notes = []
    supplied = changes.model_fields_set

    if 'status' in supplied and changes.status is not None:
        values[models.Issue.status] = changes.status.value
        notes.append((models.UpdateType.STATUS_CHANGE, f"Status changed to: {changes.status.value}"))

    if 'priority' in supplied and changes.priority:
        values[models.Issue.priority] = changes.priority
        notes.append((models.UpdateType.PRIORITY_CHANGE, f"Priority changed to: {changes.priority}"))

    if 'assigned_volunteer_id' in supplied:
        values[models.Issue.assigned_volunteer_id] = changes.assigned_volunteer_id
        if changes.assigned_volunteer_id is None:
            notes.append((models.UpdateType.ASSIGNMENT_CHANGE, "Volunteer unassigned"))
        else:
            notes.append((models.UpdateType.ASSIGNMENT_CHANGE, f"Assigned volunteer ID: {changes.assigned_volunteer_id}"))

    if 'admin_notes' in supplied and changes.admin_notes:
        values[models.Issue.admin_notes] = changes.admin_notes
        notes.append((models.UpdateType.ADMIN_UPDATE, "Admin notes updated"))

    return values, notes


def apply_update(
    db: Session,
    issue_id: int,
    changes: schemas.IssueChanges,
    acting_user_id: int | None
) -> models.Issue:

    values, notes = describe_changes(changes)
    now = utcnow()

    values[models.Issue.updated_at] = now
    # resolved_at is only ever set, reopening keeps the last resolution time
    if values.get(models.Issue.status) == models.IssueStatus.RESOLVED.value:
        values[models.Issue.resolved_at] = now

    with atomic(db):
        # checked in the same transaction that writes the foreign key
        if changes.assigned_volunteer_id is not None:
            volunteer = db.query(Volunteer.id)\
                          .filter(Volunteer.id == changes.assigned_volunteer_id)\
                          .with_for_update()\
                          .first()
            if not volunteer:
                raise NotFound("Volunteer not found")

        updated = db.query(models.Issue)\
                    .filter(models.Issue.id == issue_id)\
                    .update(values, synchronize_session=False)

        if not updated:
            raise NotFound("Issue not found")

        db.add_all([
            models.IssueUpdate(
                issue_id=issue_id,
                update_type=update_type.value,
                message=message,
                user_id=acting_user_id,
                created_at=now
            )
            for update_type, message in notes
        ])

    logger.info(f"Issue {issue_id} updated by user {acting_user_id}: {[message for _, message in notes]}")

    return db.query(models.Issue).filter(models.Issue.id == issue_id).first()
