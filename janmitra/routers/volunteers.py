from typing import Annotated
from fastapi import APIRouter, Depends, Body, status
from sqlalchemy.orm import Session
from janmitra.dependencies import get_db
from janmitra.domain.volunteer import service
from janmitra.domain.volunteer.schemas import VolunteerCreate, VolunteerOut, VolunteerCreated

router = APIRouter(
    prefix='/api/volunteers',
    tags=['Volunteers']
)

@router.get('', status_code=status.HTTP_200_OK)
async def get_active_volunteers(db: Annotated[Session, Depends(get_db)]) -> list[VolunteerOut]:
    return service.get_active_volunteers(db)

@router.post('', status_code=status.HTTP_201_CREATED)
async def register_volunteer(
    body: Annotated[VolunteerCreate, Body()],
    db: Annotated[Session, Depends(get_db)]
) -> VolunteerCreated:
    volunteer = service.register_volunteer(db, body)

    return VolunteerCreated(message="Volunteer registered successfully", volunteer_id=volunteer.id)
