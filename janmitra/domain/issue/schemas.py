from pydantic import BaseModel, ConfigDict, Field, AliasChoices, constr, conint, field_validator
from datetime import datetime
from typing import Literal
from janmitra.config import MAX_DB_INT
from .models import IssueStatus

RowId = conint(ge=1, le=MAX_DB_INT)

Category = Literal['pothole', 'streetlight', 'water_supply', 'garbage', 'public_transport', 'other']

class BaseIssue(BaseModel):
    title: constr(strip_whitespace=True, min_length=1, max_length=255)
    description: constr(strip_whitespace=True, min_length=1)
    category: Category
    location: constr(strip_whitespace=True, min_length=1, max_length=255)
    latitude: float | None = None
    longitude: float | None = None

class IssueCreate(BaseIssue):
    reporter_name: constr(strip_whitespace=True, min_length=1, max_length=127)
    reporter_email: constr(strip_whitespace=True, min_length=3, max_length=127)
    reporter_phone: str | None = None

class UpdateEntryOut(BaseModel):
    id: int
    update_type: str
    message: str
    user_id: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class IssueOut(BaseIssue):
    id: int
    photo_path: str | None = None
    status: IssueStatus
    priority: str
    assigned_volunteer_id: int | None = None
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None = None
    updates: list[UpdateEntryOut] = []

    model_config = ConfigDict(from_attributes=True)

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, value):
        # rows written before the spelling was fixed may use any casing
        return IssueStatus.parse(value)

class IssueAdminOut(IssueOut):
    reporter_name: str
    reporter_email: str
    reporter_phone: str | None = None
    admin_notes: str | None = None

class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool = Field(alias='hasMore')

    model_config = ConfigDict(populate_by_name=True)

class IssueList(BaseModel):
    items: list[IssueOut]
    pagination: Pagination

class AdminIssueList(BaseModel):
    items: list[IssueAdminOut]
    pagination: Pagination

class IssueCreated(BaseModel):
    message: str
    issue_id: int

class IssueChanges(BaseModel):
    """
    Partial update of an issue.

    A field missing from the payload is left alone. `assigned_volunteer_id`
    sent as null or "" clears the assignment, which is why callers must look
    at `model_fields_set` rather than at the value.
    """

    status: IssueStatus | None = None
    priority: constr(strip_whitespace=True, max_length=31) | None = None
    assigned_volunteer_id: RowId | None = None
    admin_notes: str | None = None

    @field_validator('status', mode='before')
    @classmethod
    def parse_status(cls, value):
        if value is None or value == '':
            return None
        return IssueStatus.parse(value)

    @field_validator('assigned_volunteer_id', mode='before')
    @classmethod
    def empty_assignment_is_none(cls, value):
        if value == '':
            return None
        return value

class BulkActionBody(BaseModel):
    action: str = ''
    ids: list[RowId] = Field(default=[], validation_alias=AliasChoices('ids', 'issueIds'))

class BulkActionResult(BaseModel):
    message: str
    affected_count: int = Field(alias='affectedCount')

    model_config = ConfigDict(populate_by_name=True)
