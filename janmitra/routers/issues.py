from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Form, File, UploadFile, Query, status
from sqlalchemy.orm import Session
from pydantic import ValidationError
from janmitra.dependencies import get_db, get_storage, ErrorExamples, RowId
from janmitra.exceptions import NotFound, ValidationFailed
from janmitra.storage import PhotoStorage
from janmitra.domain.issue import schemas, service
from janmitra.domain.issue.query import IssueFilter, list_issues

router = APIRouter(
    prefix='/api/issues',
    tags=['Issues']
)

@router.get(
    '',
    status_code=status.HTTP_200_OK
)
async def get_issue_list(
    db: Annotated[Session, Depends(get_db)],
    status: Annotated[Optional[str], Query(description='Case insensitive, e.g. "open", "in_progress", "resolved"')] = None,
    category: Optional[str] = None,
    priority: Optional[str] = None,
    assigned: Annotated[Optional[str], Query(description='"true" or "false"')] = None,
    search: Annotated[Optional[str], Query(description='Searched in title, description and location')] = None,
    limit: Annotated[Optional[str], Query(description='Defaults to 50')] = None,
    offset: Annotated[Optional[str], Query(description='Defaults to 0')] = None
) -> schemas.IssueList:
    filters = IssueFilter.from_params(
        status=status,
        category=category,
        priority=priority,
        assigned=assigned,
        search=search,
        limit=limit,
        offset=offset
    )
    page = list_issues(db, filters)

    return schemas.IssueList(
        items=[schemas.IssueOut.model_validate(item) for item in page.items],
        pagination=schemas.Pagination(total=page.total, limit=page.limit, offset=page.offset, has_more=page.has_more)
    )

@router.get(
    '/{issue_id}',
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(NotFound("Issue not found"))
)
async def get_issue_by_id(issue_id: RowId, db: Annotated[Session, Depends(get_db)]) -> schemas.IssueOut:
    if not (db_issue := service.get_issue(db, issue_id)):
        raise NotFound("Issue not found")
    return db_issue

@router.post(
    '',
    status_code=status.HTTP_201_CREATED,
    responses=ErrorExamples(ValidationFailed("Only image files are allowed (jpg, jpeg, png, gif)"))
)
async def create_issue(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[PhotoStorage, Depends(get_storage)],
    title: Annotated[str, Form()],
    description: Annotated[str, Form()],
    category: Annotated[str, Form()],
    location: Annotated[str, Form()],
    reporter_name: Annotated[str, Form()],
    reporter_email: Annotated[str, Form()],
    reporter_phone: Annotated[Optional[str], Form()] = None,
    latitude: Annotated[Optional[str], Form()] = None,
    longitude: Annotated[Optional[str], Form()] = None,
    photo: Annotated[Optional[UploadFile], File()] = None
) -> schemas.IssueCreated:
    try:
        issue = schemas.IssueCreate(
            title=title,
            description=description,
            category=category,
            location=location,
            latitude=latitude or None,
            longitude=longitude or None,
            reporter_name=reporter_name,
            reporter_email=reporter_email,
            reporter_phone=reporter_phone or None
        )
    except ValidationError as e:
        fields = ', '.join(str(error['loc'][0]) for error in e.errors())
        raise ValidationFailed(f"Invalid or missing fields: {fields}")

    photo_path = None
    if photo is not None and photo.filename:
        photo_path = await storage.save(photo)

    try:
        db_issue = service.create_issue(db, issue, photo_path)
    except Exception:
        if photo_path:
            storage.release(photo_path)
        raise

    return schemas.IssueCreated(message="Issue reported successfully", issue_id=db_issue.id)
