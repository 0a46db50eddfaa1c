from pydantic import BaseModel, ConfigDict, constr
from datetime import datetime
from typing import Literal

class VolunteerCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=127)
    email: constr(strip_whitespace=True, min_length=3, max_length=127)
    phone: str | None = None
    skills: str | None = None
    location_preference: str | None = None
    experience_level: str | None = None
    availability: str | None = None

class VolunteerOut(VolunteerCreate):
    id: int
    status: Literal['active', 'inactive']
    joined_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class VolunteerStatusBody(BaseModel):
    status: Literal['active', 'inactive']

class VolunteerCreated(BaseModel):
    message: str
    volunteer_id: int
