"""
Issue listing: filter parsing, query construction and pagination.

Both the public listing and the admin listing go through `list_issues`,
the admin one additionally searches reporter names.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session, Query, selectinload
from sqlalchemy.sql import or_
from pydantic import BaseModel
from janmitra.config import DEFAULT_PAGE_LIMIT, DEFAULT_PAGE_OFFSET, MAX_DB_INT
from typing import Any, Optional
from . import models


def coerce_window(value: Any, default: int) -> int:
    """
    Lenient integer parsing for `limit` / `offset`.

    Anything that is not a non-negative integer the store can hold falls
    back to `default` instead of failing the request.
    """

    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if 0 <= number <= MAX_DB_INT else default


def parse_assigned(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if normalized == 'true':
        return True
    if normalized == 'false':
        return False
    return None


class IssueFilter(BaseModel):
    status: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    assigned: Optional[bool] = None
    search: Optional[str] = None
    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = DEFAULT_PAGE_OFFSET
    include_reporter: bool = False

    @classmethod
    def from_params(
        cls,
        status: Any = None,
        category: Any = None,
        priority: Any = None,
        assigned: Any = None,
        search: Any = None,
        limit: Any = None,
        offset: Any = None,
        include_reporter: bool = False
    ) -> "IssueFilter":
        return cls(
            status=status or None,
            category=category or None,
            priority=priority or None,
            assigned=parse_assigned(assigned),
            search=search or None,
            limit=coerce_window(limit, DEFAULT_PAGE_LIMIT),
            offset=coerce_window(offset, DEFAULT_PAGE_OFFSET),
            include_reporter=include_reporter
        )


class IssuePage(BaseModel):
    items: list[Any]
    total: int
    limit: int
    offset: int
    has_more: bool


def build_issue_query(db: Session, filters: IssueFilter) -> Query:
    query = db.query(models.Issue)

    # Status is compared case-insensitively
    if filters.status and filters.status.lower() != 'all':
        query = query.filter(func.lower(models.Issue.status) == filters.status.strip().lower())

    if filters.category and filters.category != 'all':
        query = query.filter(models.Issue.category == filters.category)

    if filters.priority and filters.priority != 'all':
        query = query.filter(models.Issue.priority == filters.priority)

    if filters.assigned is True:
        query = query.filter(models.Issue.assigned_volunteer_id.is_not(None))
    elif filters.assigned is False:
        query = query.filter(models.Issue.assigned_volunteer_id.is_(None))

    if filters.search:
        columns = [
            models.Issue.title,
            models.Issue.description,
            models.Issue.location
        ]
        if filters.include_reporter:
            columns.append(models.Issue.reporter_name)

        query = query.filter(
            or_(*(column.icontains(filters.search, autoescape=True) for column in columns))
        )

    return query


def list_issues(db: Session, filters: IssueFilter) -> IssuePage:
    query = build_issue_query(db, filters)

    total = query.order_by(None).count()

    items = query\
        .options(selectinload(models.Issue.updates))\
        .order_by(models.Issue.created_at.desc(), models.Issue.id.desc())\
        .offset(filters.offset)\
        .limit(filters.limit)\
        .all()

    return IssuePage(
        items=items,
        total=total,
        limit=filters.limit,
        offset=filters.offset,
        has_more=filters.offset + filters.limit < total
    )
