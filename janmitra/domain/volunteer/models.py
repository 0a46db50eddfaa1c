from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from ..model_base import Base, utcnow

VOLUNTEER_STATUSES = ('active', 'inactive')

class Volunteer(Base):
    __tablename__ = "volunteers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(127), nullable=False)
    email = Column(String(127), nullable=False)
    phone = Column(String(31), nullable=True)
    skills = Column(String(511), nullable=True)
    location_preference = Column(String(255), nullable=True)
    experience_level = Column(String(63), nullable=True)
    availability = Column(String(127), nullable=True)
    status = Column(String(15), nullable=False, default='active', index=True)
    joined_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    assigned_issues = relationship('Issue', back_populates='assigned_volunteer', passive_deletes=True)

    def __repr__(self):
        return f"<Volunteer(id={self.id}, name={self.name}, status={self.status})>"
