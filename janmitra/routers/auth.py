from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Body, status
from sqlalchemy.orm import Session
from pydantic import BaseModel
from datetime import datetime
from janmitra.dependencies import (
    get_db, get_ledger, get_token, get_identity, require_staff,
    DefaultResponseModel, ErrorExamples
)
from janmitra.exceptions import InvalidCredentials, DuplicateIdentity, MissingToken, InvalidToken, SessionExpired, Forbidden, NotFound
from janmitra.domain.session.service import SessionLedger
from janmitra.domain.session.schemas import Identity
from janmitra.domain.user import service
from janmitra.domain.user.schemas import UserCreate, UserOut, LoginBody, PasswordChangeBody
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"],
    responses={500: {'description': 'Internal Server Error'}},
)

AUTH_ERRORS = (MissingToken(), InvalidToken(), SessionExpired())

class LoginResponse(BaseModel):
    message: str
    token: str
    expires_at: datetime
    user: UserOut

class RegisterResponse(BaseModel):
    message: str
    user_id: int

class VerifyResponse(BaseModel):
    valid: bool
    user: UserOut


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(InvalidCredentials())
)
async def login(
    body: Annotated[LoginBody, Body()],
    db: Annotated[Session, Depends(get_db)],
    ledger: Annotated[SessionLedger, Depends(get_ledger)]
) -> LoginResponse:
    user = await service.verify_credentials(db, body.username, body.password, body.role)
    issued = ledger.issue(user)

    logger.info(f"User {user.id} logged in")

    return LoginResponse(
        message="Login successful",
        token=issued.token,
        expires_at=issued.expires_at,
        user=UserOut.model_validate(user)
    )

@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    responses=ErrorExamples(DuplicateIdentity(), Forbidden(), *AUTH_ERRORS)
)
async def register_user(
    body: Annotated[UserCreate, Body()],
    identity: Annotated[Identity, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)]
) -> RegisterResponse:
    user = await service.create_user(db, body)

    logger.info(f"User {user.id} registered by {identity.username}")

    return RegisterResponse(message="User registered successfully", user_id=user.id)

@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    token: Annotated[Optional[str], Depends(get_token)],
    ledger: Annotated[SessionLedger, Depends(get_ledger)]
) -> DefaultResponseModel:
    if token:
        ledger.revoke(token)
        logger.info("Session revoked on logout")

    return {
        "message": "Logout successful"
    }

@router.post(
    "/logout-all",
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(*AUTH_ERRORS)
)
async def logout_everywhere(
    identity: Annotated[Identity, Depends(get_identity)],
    ledger: Annotated[SessionLedger, Depends(get_ledger)]
) -> DefaultResponseModel:
    revoked = ledger.revoke_all(identity.user_id)

    return {
        "message": f"Logged out of {revoked} session(s)"
    }

@router.post(
    "/verify",
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(NotFound("User not found"), *AUTH_ERRORS)
)
async def verify_token(
    identity: Annotated[Identity, Depends(get_identity)],
    db: Annotated[Session, Depends(get_db)]
) -> VerifyResponse:
    if not (user := service.get_user(db, identity.user_id)):
        raise NotFound("User not found")

    return VerifyResponse(valid=True, user=UserOut.model_validate(user))

@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    responses=ErrorExamples(InvalidCredentials("Current password is incorrect"), NotFound("User not found"), *AUTH_ERRORS)
)
async def change_password(
    body: Annotated[PasswordChangeBody, Body()],
    identity: Annotated[Identity, Depends(get_identity)],
    db: Annotated[Session, Depends(get_db)]
) -> DefaultResponseModel:
    await service.change_password(db, identity.user_id, body.current_password, body.new_password)

    return {
        "message": "Password changed successfully"
    }
