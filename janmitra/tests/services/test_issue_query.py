from janmitra.tests.utils import create_test_issue
from janmitra.domain.issue.query import IssueFilter, coerce_window, parse_assigned, list_issues

from sqlalchemy.orm import Session
import pytest


@pytest.mark.parametrize('value, expected', [
    (None, 50),
    ('', 50),
    ('abc', 50),
    ('-1', 50),
    ('2.5', 50),
    (True, 50),
    ('0', 0),
    (' 20 ', 20),
    (7, 7),
    ('99999999999999999999', 50),
    (str(2**63), 50),
    (str(2**63 - 1), 2**63 - 1),
])
def test_coerce_window(value, expected):
    assert coerce_window(value, 50) == expected

@pytest.mark.parametrize('value, expected', [
    ('true', True),
    ('FALSE', False),
    ('maybe', None),
    (None, None),
])
def test_parse_assigned(value, expected):
    assert parse_assigned(value) is expected

def test_filter_from_params_blank_values():
    filters = IssueFilter.from_params(status='', category='', search='', limit='x', offset=None)

    assert filters.status is None
    assert filters.category is None
    assert filters.search is None
    assert (filters.limit, filters.offset) == (50, 0)

def test_list_issues_has_more(session: Session):
    for minutes in range(3):
        create_test_issue(session, age_minutes=minutes)

    page = list_issues(session, IssueFilter(limit=2, offset=1))

    assert page.total == 3
    assert len(page.items) == 2
    assert page.has_more is False

def test_list_issues_zero_limit(session: Session):
    create_test_issue(session)

    page = list_issues(session, IssueFilter(limit=0))

    assert page.items == []
    assert page.total == 1
    assert page.has_more is True

def test_list_issues_offset_past_end(session: Session):
    create_test_issue(session)

    page = list_issues(session, IssueFilter(offset=10))

    assert page.items == []
    assert page.has_more is False

def test_list_issues_ties_broken_by_id(session: Session):
    first = create_test_issue(session)
    second = create_test_issue(session, created_at=first.created_at)

    page = list_issues(session, IssueFilter())

    assert [issue.id for issue in page.items] == [second.id, first.id]
