from sqlalchemy.orm import Session
from janmitra.domain.model_base import utcnow
from janmitra.domain.user.models import User
from janmitra.domain.user.service import hash_password
from janmitra.domain.issue.models import Issue, IssueUpdate, IssueStatus, UpdateType
from janmitra.domain.volunteer.models import Volunteer
from typing import Final
import datetime
import faker

TEST_PASSWORD: Final[str] = 'PasswordExample'

fake = faker.Faker()


def create_test_user(
    session: Session,
    username: str | None = None,
    role: str = 'admin',
    password: str = TEST_PASSWORD
) -> User:
    username = username or fake.unique.user_name()

    user = User(
        username=username,
        email=f'{username}@example.com',
        password_hash=hash_password(password),
        role=role,
        full_name=fake.name()
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    return user

def create_test_volunteer(session: Session, **overrides) -> Volunteer:
    volunteer_data = {
        'name': fake.name(),
        'email': fake.email(),
        'phone': fake.phone_number(),
        'skills': 'plumbing, electrical',
        'location_preference': fake.city(),
        'status': 'active',
    }
    volunteer_data.update(overrides)

    volunteer = Volunteer(**volunteer_data)

    session.add(volunteer)
    session.commit()
    session.refresh(volunteer)

    return volunteer

def create_test_issue(session: Session, age_minutes: int = 0, **overrides) -> Issue:
    """
    Adds an issue with its initial audit entry.

    `age_minutes` backdates `created_at`, so tests can control the
    newest-first order.
    """

    created_at = utcnow() - datetime.timedelta(minutes=age_minutes)

    issue_data = {
        'title': fake.sentence(nb_words=4),
        'description': fake.paragraph(),
        'category': 'pothole',
        'location': fake.street_address(),
        'reporter_name': fake.name(),
        'reporter_email': fake.email(),
        'status': IssueStatus.OPEN.value,
        'priority': 'medium',
        'created_at': created_at,
        'updated_at': created_at,
    }
    issue_data.update(overrides)

    issue = Issue(
        **issue_data,
        updates=[
            IssueUpdate(
                update_type=UpdateType.STATUS_CHANGE.value,
                message="Issue reported and submitted for review",
                created_at=created_at
            )
        ]
    )

    session.add(issue)
    session.commit()
    session.refresh(issue)

    return issue

def issue_payload(**overrides) -> dict:
    """Form fields for `POST /api/issues`."""

    payload = {
        'title': 'Deep pothole near the school',
        'description': 'The pothole has been growing for weeks',
        'category': 'pothole',
        'location': 'MG Road, Ward 4',
        'reporter_name': 'Asha',
        'reporter_email': 'asha@example.com',
    }
    payload.update(overrides)

    return payload
