from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from ..dependencies import get_db

router = APIRouter(
    prefix="",
    tags=["Root"],
    responses={404: {'description': 'Not found'}},
)

@router.get("/health")
async def health(db: Annotated[Session, Depends(get_db)]) -> dict:
    db.execute(text("SELECT 1"))
    return {"status": "ok"}
