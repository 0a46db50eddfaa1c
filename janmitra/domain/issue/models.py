from sqlalchemy import Column, ForeignKey, Integer, String, Float, DateTime, Text
from sqlalchemy.orm import relationship, validates
from ..model_base import Base, utcnow
from enum import Enum


class IssueStatus(str, Enum):
    """
    Issue lifecycle states.

    Any state may move to any other, resolved issues can be reopened.
    The stored values keep the spelling existing clients already use,
    inputs are matched case-insensitively via `parse`.
    """

    OPEN = 'Open'
    IN_PROGRESS = 'in_progress'
    RESOLVED = 'resolved'

    @classmethod
    def parse(cls, value: "str | IssueStatus") -> "IssueStatus":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(f"Invalid status '{value}'. Allowed values are: {', '.join(m.value for m in cls)}")


class UpdateType(str, Enum):
    STATUS_CHANGE = 'status_change'
    PRIORITY_CHANGE = 'priority_change'
    ASSIGNMENT_CHANGE = 'assignment_change'
    ADMIN_UPDATE = 'admin_update'
    BULK_ACTION = 'bulk_action'


class Issue(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(31), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    reporter_name = Column(String(127), nullable=False)
    reporter_email = Column(String(127), nullable=False)
    reporter_phone = Column(String(31), nullable=True)
    photo_path = Column(String(255), nullable=True)
    status = Column(String(15), nullable=False, default=IssueStatus.OPEN.value, index=True)
    priority = Column(String(31), nullable=False, default='medium')
    assigned_volunteer_id = Column(Integer, ForeignKey('volunteers.id', ondelete='SET NULL'), nullable=True)
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    resolved_at = Column(DateTime, nullable=True)

    updates = relationship(
        'IssueUpdate',
        back_populates='issue',
        order_by='[IssueUpdate.created_at, IssueUpdate.id]',
        cascade='all, delete-orphan',
        passive_deletes=True
    )
    assigned_volunteer = relationship('Volunteer', back_populates='assigned_issues')

    @validates('status')
    def normalize_status(self, key, value):
        return IssueStatus.parse(value).value

    def __repr__(self):
        return f"<Issue(id={self.id}, title={self.title}, status={self.status}, created_at={self.created_at})>"


class IssueUpdate(Base):
    """One audit record of an issue, appended and never edited."""

    __tablename__ = "issue_updates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(Integer, ForeignKey('issues.id', ondelete='CASCADE'), nullable=False, index=True)
    update_type = Column(String(31), nullable=False)
    message = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    issue = relationship('Issue', back_populates='updates')

    def __repr__(self):
        return f"<IssueUpdate(issue_id={self.issue_id}, update_type={self.update_type}, created_at={self.created_at})>"
