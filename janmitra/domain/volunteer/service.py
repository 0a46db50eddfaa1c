from sqlalchemy import select, Select
from sqlalchemy.orm import Session
from sqlalchemy.sql import or_
from janmitra.database import atomic
from janmitra.exceptions import NotFound, ValidationFailed
from janmitra.domain.model_base import utcnow
from . import models, schemas
from typing import Optional
import logging

logger = logging.getLogger(__name__)

def get_volunteer(db: Session, volunteer_id: int) -> models.Volunteer | None:
    return db.query(models.Volunteer).filter(models.Volunteer.id == volunteer_id).first()

def register_volunteer(db: Session, volunteer: schemas.VolunteerCreate) -> models.Volunteer:
    db_volunteer = models.Volunteer(status='active', **volunteer.model_dump())

    with atomic(db):
        db.add(db_volunteer)

    db.refresh(db_volunteer)
    logger.info(f"Volunteer registered: {db_volunteer.id}")
    return db_volunteer

def get_active_volunteers(db: Session) -> list[models.Volunteer]:
    return db.query(models.Volunteer)\
             .filter(models.Volunteer.status == 'active')\
             .order_by(models.Volunteer.joined_at.desc(), models.Volunteer.id.desc())\
             .all()

def search_volunteers(
    status: Optional[str] = None,
    skills: Optional[str] = None,
    search: Optional[str] = None
) -> Select:
    """Admin search, returned as a statement so it can be paginated."""

    query = select(models.Volunteer)

    if status and status != 'all':
        query = query.where(models.Volunteer.status == status)

    if skills:
        query = query.where(models.Volunteer.skills.icontains(skills, autoescape=True))

    if search:
        query = query.where(
            or_(
                models.Volunteer.name.icontains(search, autoescape=True),
                models.Volunteer.email.icontains(search, autoescape=True),
                models.Volunteer.location_preference.icontains(search, autoescape=True)
            )
        )

    return query.order_by(models.Volunteer.joined_at.desc(), models.Volunteer.id.desc())

def update_volunteer_status(db: Session, volunteer_id: int, status: str) -> models.Volunteer:
    if status not in models.VOLUNTEER_STATUSES:
        raise ValidationFailed(f"Invalid volunteer status '{status}'")

    with atomic(db):
        updated = db.query(models.Volunteer).filter(models.Volunteer.id == volunteer_id).update({
            models.Volunteer.status: status,
            models.Volunteer.updated_at: utcnow()
        }, synchronize_session=False)

        if not updated:
            raise NotFound("Volunteer not found")

    return get_volunteer(db, volunteer_id)
