from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Body, Query, status
from fastapi_pagination import LimitOffsetPage
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session
from janmitra.dependencies import get_db, get_storage, require_staff, DefaultResponseModel, ErrorExamples, RowId
from janmitra.exceptions import NotFound, InvalidAction, EmptySelection, Forbidden, MissingToken, InvalidToken, SessionExpired
from janmitra.storage import PhotoStorage
from janmitra.domain.session.schemas import Identity
from janmitra.domain.issue import schemas, service, transitions, bulk
from janmitra.domain.issue.query import IssueFilter, list_issues
from janmitra.domain.volunteer import service as volunteer_service
from janmitra.domain.volunteer.schemas import VolunteerOut, VolunteerStatusBody

# every route here goes through the gate before touching the store
router = APIRouter(
    prefix='/api/admin',
    tags=['Admin'],
    dependencies=[Depends(require_staff)],
    responses=ErrorExamples(MissingToken(), InvalidToken(), SessionExpired(), Forbidden())
)

Staff = Annotated[Identity, Depends(require_staff)]

@router.get(
    '/issues',
    status_code=status.HTTP_200_OK
)
async def get_admin_issue_list(
    db: Annotated[Session, Depends(get_db)],
    status: Optional[str] = None,
    category: Optional[str] = None,
    priority: Optional[str] = None,
    assigned: Annotated[Optional[str], Query(description='"true" or "false"')] = None,
    search: Annotated[Optional[str], Query(description='Searched in title, description, location and reporter name')] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None
) -> schemas.AdminIssueList:
    filters = IssueFilter.from_params(
        status=status,
        category=category,
        priority=priority,
        assigned=assigned,
        search=search,
        limit=limit,
        offset=offset,
        include_reporter=True
    )
    page = list_issues(db, filters)

    return schemas.AdminIssueList(
        items=[schemas.IssueAdminOut.model_validate(item) for item in page.items],
        pagination=schemas.Pagination(total=page.total, limit=page.limit, offset=page.offset, has_more=page.has_more)
    )

@router.put(
    '/issues/{issue_id}',
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(NotFound("Issue not found"))
)
async def update_issue(
    issue_id: RowId,
    changes: Annotated[schemas.IssueChanges, Body()],
    identity: Staff,
    db: Annotated[Session, Depends(get_db)]
) -> schemas.IssueAdminOut:
    return transitions.apply_update(db, issue_id, changes, identity.user_id)

@router.delete(
    '/issues/{issue_id}',
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(NotFound("Issue not found"))
)
async def delete_issue(
    issue_id: RowId,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[PhotoStorage, Depends(get_storage)]
) -> DefaultResponseModel:
    service.delete_issue(db, issue_id, storage)

    return {
        "message": "Issue deleted successfully"
    }

@router.post(
    '/bulk-actions',
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(InvalidAction(), EmptySelection())
)
async def bulk_action(
    body: Annotated[schemas.BulkActionBody, Body()],
    identity: Staff,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[PhotoStorage, Depends(get_storage)]
) -> schemas.BulkActionResult:
    affected = bulk.apply_bulk(db, body.ids, body.action, identity.user_id, storage)

    return schemas.BulkActionResult(
        message="Bulk action completed successfully",
        affected_count=affected
    )

@router.get(
    '/volunteers',
    status_code=status.HTTP_200_OK
)
async def get_admin_volunteer_list(
    db: Annotated[Session, Depends(get_db)],
    status: Optional[str] = None,
    skills: Optional[str] = None,
    search: Annotated[Optional[str], Query(description='Searched in name, email and location preference')] = None
) -> LimitOffsetPage[VolunteerOut]:
    return paginate(db, volunteer_service.search_volunteers(status=status, skills=skills, search=search))

@router.put(
    '/volunteers/{volunteer_id}',
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(NotFound("Volunteer not found"))
)
async def update_volunteer(
    volunteer_id: RowId,
    body: Annotated[VolunteerStatusBody, Body()],
    db: Annotated[Session, Depends(get_db)]
) -> VolunteerOut:
    return volunteer_service.update_volunteer_status(db, volunteer_id, body.status)
