from sqlalchemy.orm import Session
from janmitra.database import atomic
from janmitra.exceptions import NotFound
from janmitra.storage import PhotoStorage
from janmitra.domain.model_base import utcnow
from . import models, schemas
import logging

logger = logging.getLogger(__name__)

def get_issue(db: Session, issue_id: int) -> models.Issue | None:
    return db.query(models.Issue).filter(models.Issue.id == issue_id).first()

def create_issue(db: Session, issue: schemas.IssueCreate, photo_path: str | None = None) -> models.Issue:
    now = utcnow()
    db_issue = models.Issue(
        **issue.model_dump(),
        photo_path=photo_path,
        status=models.IssueStatus.OPEN.value,
        created_at=now,
        updated_at=now,
        updates=[
            models.IssueUpdate(
                update_type=models.UpdateType.STATUS_CHANGE.value,
                message="Issue reported and submitted for review",
                created_at=now
            )
        ]
    )

    with atomic(db):
        db.add(db_issue)

    db.refresh(db_issue)
    logger.info(f"Issue reported: {db_issue.id} ({db_issue.category})")
    return db_issue

def delete_issue(db: Session, issue_id: int, storage: PhotoStorage) -> None:
    """
    Removes the issue and its whole audit history, then asks storage
    to release the photo. A storage failure does not undo the deletion.
    """

    if not (db_issue := get_issue(db, issue_id)):
        raise NotFound("Issue not found")

    photo_path = db_issue.photo_path

    # the updates collection cascades with the issue
    with atomic(db):
        db.delete(db_issue)

    if photo_path:
        storage.release(photo_path)

    logger.info(f"Issue {issue_id} deleted")
