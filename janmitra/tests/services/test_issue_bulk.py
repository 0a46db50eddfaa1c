from janmitra.tests.utils import create_test_issue
from janmitra.exceptions import InvalidAction, EmptySelection, StoreUnavailable
from janmitra.storage import PhotoStorage
from janmitra.domain.issue.models import Issue, IssueUpdate
from janmitra.domain.issue.bulk import BulkAction, apply_bulk

from sqlalchemy.orm import Session
import os
import pytest
from typing import Callable


def test_bulk_action_parse():
    assert BulkAction.parse('mark_in_progress') is BulkAction.MARK_IN_PROGRESS

    with pytest.raises(InvalidAction):
        BulkAction.parse('archive')

def test_bulk_ignores_missing_ids(session: Session, storage: PhotoStorage):
    first = create_test_issue(session)
    second = create_test_issue(session)

    affected = apply_bulk(session, [first.id, second.id, 999], 'mark_in_progress', None, storage)

    assert affected == 2
    assert {issue.status for issue in session.query(Issue).all()} == {'in_progress'}

def test_bulk_one_entry_per_issue(session: Session, storage: PhotoStorage):
    issue = create_test_issue(session, priority='low')

    apply_bulk(session, [issue.id, issue.id], 'mark_resolved', None, storage)

    entries = session.query(IssueUpdate).filter_by(issue_id=issue.id, update_type='bulk_action').all()
    assert [entry.message for entry in entries] == ['Bulk marked as resolved']

def test_bulk_no_match(session: Session, storage: PhotoStorage):
    assert apply_bulk(session, [999], 'set_high_priority', None, storage) == 0
    assert session.query(IssueUpdate).count() == 0

def test_bulk_invalid_action_checked_first(session: Session, storage: PhotoStorage):
    with pytest.raises(InvalidAction):
        apply_bulk(session, [], 'archive', None, storage)

def test_bulk_empty_selection(session: Session, storage: PhotoStorage):
    with pytest.raises(EmptySelection):
        apply_bulk(session, [], 'delete', None, storage)

def test_bulk_delete_releases_photos(session: Session, storage: PhotoStorage):
    with open(storage.path_for('issue-a.png'), 'wb') as f:
        f.write(b'png')
    with_photo = create_test_issue(session, photo_path='/uploads/issue-a.png')
    without_photo = create_test_issue(session)
    ids = [with_photo.id, without_photo.id]

    assert apply_bulk(session, ids, BulkAction.DELETE, None, storage) == 2

    assert session.query(Issue).count() == 0
    assert session.query(IssueUpdate).count() == 0
    assert not os.path.exists(storage.path_for('issue-a.png'))

def test_bulk_delete_missing_photo_is_not_an_error(session: Session, storage: PhotoStorage):
    issue = create_test_issue(session, photo_path='/uploads/issue-gone.jpg')

    assert apply_bulk(session, [issue.id], 'delete', None, storage) == 1

def test_bulk_store_failure_changes_nothing(session: Session, storage: PhotoStorage, break_history_writes: Callable[[], None]):
    first = create_test_issue(session, priority='low')
    second = create_test_issue(session, priority='low')
    entries_before = session.query(IssueUpdate).count()

    break_history_writes()
    with pytest.raises(StoreUnavailable):
        apply_bulk(session, [first.id, second.id], 'mark_resolved', None, storage)

    for issue in (first, second):
        session.refresh(issue)
        assert issue.status == 'Open'
        assert issue.resolved_at is None
    assert session.query(IssueUpdate).count() == entries_before
    assert session.query(IssueUpdate).filter_by(update_type='bulk_action').count() == 0
