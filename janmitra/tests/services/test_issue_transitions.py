from janmitra.tests.utils import create_test_issue, create_test_user, create_test_volunteer
from janmitra.exceptions import NotFound, StoreUnavailable
from janmitra.domain.issue.models import IssueStatus, IssueUpdate
from janmitra.domain.issue.schemas import IssueChanges
from janmitra.domain.issue.transitions import apply_update, describe_changes

from sqlalchemy.orm import Session
import pytest
from typing import Callable


def history(session: Session, issue_id: int) -> list[IssueUpdate]:
    return session.query(IssueUpdate)\
                  .filter(IssueUpdate.issue_id == issue_id)\
                  .order_by(IssueUpdate.created_at, IssueUpdate.id)\
                  .all()


@pytest.mark.parametrize('value, expected', [
    ('open', IssueStatus.OPEN),
    ('OPEN', IssueStatus.OPEN),
    ('Open', IssueStatus.OPEN),
    ('In_Progress', IssueStatus.IN_PROGRESS),
    (' resolved ', IssueStatus.RESOLVED),
])
def test_status_parse(value, expected):
    assert IssueStatus.parse(value) is expected

def test_status_parse_unknown():
    with pytest.raises(ValueError):
        IssueStatus.parse('closed')

def test_describe_changes_skips_missing_fields():
    values, notes = describe_changes(IssueChanges(priority='low'))

    assert [message for _, message in notes] == ['Priority changed to: low']
    assert len(values) == 1

def test_describe_changes_explicit_null_unassigns():
    values, notes = describe_changes(IssueChanges(assigned_volunteer_id=None))

    assert [message for _, message in notes] == ['Volunteer unassigned']

def test_describe_changes_empty():
    assert describe_changes(IssueChanges()) == ({}, [])

def test_apply_update_records_actor(session: Session):
    user = create_test_user(session)
    issue = create_test_issue(session)

    updated = apply_update(session, issue.id, IssueChanges(status='in_progress'), user.id)

    assert updated.status == 'in_progress'
    assert updated.resolved_at is None
    entry = history(session, issue.id)[-1]
    assert (entry.update_type, entry.user_id) == ('status_change', user.id)

def test_apply_update_same_status_still_audited(session: Session):
    issue = create_test_issue(session)

    apply_update(session, issue.id, IssueChanges(status='Open'), None)

    assert [u.message for u in history(session, issue.id)][-1] == 'Status changed to: Open'

def test_apply_update_refreshes_updated_at(session: Session):
    issue = create_test_issue(session, age_minutes=60)
    before = issue.updated_at

    updated = apply_update(session, issue.id, IssueChanges(), None)

    assert updated.updated_at > before
    assert len(history(session, issue.id)) == 1

def test_apply_update_resolve_then_reopen(session: Session):
    issue = create_test_issue(session)

    resolved = apply_update(session, issue.id, IssueChanges(status='resolved'), None)
    resolved_at = resolved.resolved_at
    assert resolved_at is not None

    reopened = apply_update(session, issue.id, IssueChanges(status='open'), None)

    assert reopened.status == 'Open'
    assert reopened.resolved_at == resolved_at

def test_apply_update_resolving_again_moves_resolved_at(session: Session):
    issue = create_test_issue(session)

    first = apply_update(session, issue.id, IssueChanges(status='resolved'), None).resolved_at
    second = apply_update(session, issue.id, IssueChanges(status='resolved'), None).resolved_at

    assert second >= first

def test_apply_update_missing_issue(session: Session):
    with pytest.raises(NotFound):
        apply_update(session, 999, IssueChanges(status='resolved'), None)

    assert session.query(IssueUpdate).count() == 0

def test_apply_update_missing_volunteer_changes_nothing(session: Session):
    issue = create_test_issue(session, priority='low')

    with pytest.raises(NotFound):
        apply_update(session, issue.id, IssueChanges(priority='high', assigned_volunteer_id=42), None)

    session.refresh(issue)
    assert issue.priority == 'low'
    assert len(history(session, issue.id)) == 1

def test_apply_update_assign(session: Session):
    volunteer = create_test_volunteer(session)
    issue = create_test_issue(session)

    updated = apply_update(session, issue.id, IssueChanges(assigned_volunteer_id=volunteer.id), None)

    assert updated.assigned_volunteer.id == volunteer.id

def test_apply_update_volunteer_removed_before_assignment(session: Session):
    volunteer = create_test_volunteer(session)
    volunteer_id = volunteer.id
    issue = create_test_issue(session, priority='low')
    session.delete(volunteer)
    session.commit()

    with pytest.raises(NotFound):
        apply_update(session, issue.id, IssueChanges(priority='high', assigned_volunteer_id=volunteer_id), None)

    session.refresh(issue)
    assert issue.priority == 'low'
    assert issue.assigned_volunteer_id is None
    assert len(history(session, issue.id)) == 1

def test_apply_update_store_failure_changes_nothing(session: Session, break_history_writes: Callable[[], None]):
    issue = create_test_issue(session)

    break_history_writes()
    with pytest.raises(StoreUnavailable):
        apply_update(session, issue.id, IssueChanges(status='resolved', admin_notes='crew sent'), None)

    session.refresh(issue)
    assert issue.status == 'Open'
    assert issue.resolved_at is None
    assert issue.admin_notes is None
    assert len(history(session, issue.id)) == 1
