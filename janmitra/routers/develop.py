from typing import Annotated
from fastapi import Depends, APIRouter, Query
from sqlalchemy.orm import Session
from faker import Faker
from janmitra.config import CATEGORIES
from janmitra.database import atomic
from janmitra.dependencies import get_db
from janmitra.domain.model_base import utcnow
from janmitra.domain.issue.models import Issue, IssueStatus, IssueUpdate, UpdateType
from janmitra.domain.volunteer.models import Volunteer
import datetime
import random


router = APIRouter(
    prefix='/develop',
    tags=['Develop']
)


@router.post("/sample-data/")
def seed_data(
    db: Annotated[Session, Depends(get_db)],
    volunteer_amount: int = Query(10, ge=1, le=100, description="Must be between 1 and 100"),
    issue_amount: int = Query(30, ge=1, le=500, description="Must be between 1 and 500")
):
    fake = Faker()

    with atomic(db):
        volunteers = [
            Volunteer(
                name=fake.name(),
                email=fake.email(),
                phone=fake.phone_number(),
                skills=', '.join(fake.words(nb=2)),
                location_preference=fake.city(),
                experience_level=fake.random_element(['beginner', 'intermediate', 'expert']),
                availability=fake.random_element(['weekdays', 'weekends', 'evenings']),
                status=fake.random_element(['active', 'active', 'inactive'])
            ) for _ in range(volunteer_amount)
        ]
        db.add_all(volunteers)
        db.flush()

        for _ in range(issue_amount):
            created_at = utcnow() - datetime.timedelta(minutes=random.randint(0, 60 * 24 * 60))
            status = random.choice(list(IssueStatus))

            issue = Issue(
                title=fake.sentence(nb_words=6),
                description=fake.paragraph(),
                category=random.choice(CATEGORIES),
                location=fake.street_address(),
                latitude=float(fake.latitude()),
                longitude=float(fake.longitude()),
                reporter_name=fake.name(),
                reporter_email=fake.email(),
                reporter_phone=fake.phone_number(),
                status=status.value,
                priority=random.choice(['low', 'medium', 'high']),
                assigned_volunteer_id=random.choice([None, random.choice(volunteers).id]),
                created_at=created_at,
                updated_at=created_at,
                resolved_at=created_at if status is IssueStatus.RESOLVED else None,
                updates=[
                    IssueUpdate(
                        update_type=UpdateType.STATUS_CHANGE.value,
                        message="Issue reported and submitted for review",
                        created_at=created_at
                    )
                ]
            )
            db.add(issue)

    return {
        "message": "Sample data created",
        "volunteers": volunteer_amount,
        "issues": issue_amount
    }
