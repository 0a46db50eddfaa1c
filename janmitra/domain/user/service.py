from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from passlib.context import CryptContext
from janmitra.database import atomic
from janmitra.exceptions import DuplicateIdentity, InvalidCredentials, NotFound, StoreUnavailable
from janmitra.domain.model_base import utcnow
from janmitra.domain.session.models import UserSession
from . import models, schemas
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)

def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()

def get_user_by_username(db: Session, username: str):
    return db.query(models.User).filter(models.User.username == username).first()

def get_user_by_username_or_email(db: Session, username: str, email: str):
    return db.query(models.User).filter(
        or_(
            models.User.username == username,
            models.User.email == email
        )
    ).first()

async def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    if get_user_by_username_or_email(db, user.username, user.email):
        raise DuplicateIdentity()

    # bcrypt is slow on purpose, keep it off the event loop
    password_hash = await run_in_threadpool(hash_password, user.password)

    db_user = models.User(
        username=user.username,
        email=user.email,
        password_hash=password_hash,
        role=user.role,
        full_name=user.full_name,
        phone=user.phone
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        db.rollback()
        raise DuplicateIdentity()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailable() from e

    db.refresh(db_user)
    logger.info(f"User created: {db_user}")
    return db_user

async def verify_credentials(db: Session, username: str, password: str, role: str | None = None) -> models.User:
    query = db.query(models.User).filter(models.User.username == username)
    if role:
        query = query.filter(models.User.role == role)

    user = query.first()
    if not user:
        # same hashing cost as a wrong password, unknown usernames stay indistinguishable
        await run_in_threadpool(pwd_context.dummy_verify)
        raise InvalidCredentials()

    if not await run_in_threadpool(verify_password, password, user.password_hash):
        raise InvalidCredentials()

    return user

async def change_password(db: Session, user_id: int, old_password: str, new_password: str) -> None:
    if not (user := get_user(db, user_id)):
        raise NotFound("User not found")

    if not await run_in_threadpool(verify_password, old_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect")

    password_hash = await run_in_threadpool(hash_password, new_password)

    with atomic(db):
        user.password_hash = password_hash
        user.updated_at = utcnow()

    logger.info(f"Password changed for user {user.id}")

def delete_user(db: Session, user_id: int) -> None:
    """
    Deletes the user together with every session issued to them.

    Sessions only reference the user by id, so they are revoked explicitly
    in the same transaction instead of relying on a cascade.
    """

    if not (user := get_user(db, user_id)):
        raise NotFound("User not found")

    with atomic(db):
        revoked = db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session=False)
        db.delete(user)

    logger.info(f"User {user_id} deleted, {revoked} session(s) revoked")
