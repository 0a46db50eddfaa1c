from sqlalchemy.orm import Session
from janmitra.config import Settings
from janmitra.database import atomic
from janmitra.exceptions import InvalidToken, SessionExpired
from janmitra.domain.model_base import utcnow
from janmitra.domain.user.models import User
from . import models, schemas
import datetime
import secrets
import jwt
import logging

logger = logging.getLogger(__name__)


class SessionLedger:
    """
    Issues, resolves and revokes session tokens.

    Tokens are signed JWTs, but a valid signature alone is never enough:
    every token must also have a live row in the `sessions` table, so a
    logout takes effect immediately even though the token itself would
    still verify.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def issue(self, user: User, ttl: datetime.timedelta | None = None) -> schemas.IssuedSession:
        if ttl is None:
            ttl = datetime.timedelta(minutes=self.settings.session_expire_time)

        expires_at = utcnow() + ttl
        token = jwt.encode(
            {
                "id": user.id,
                "username": user.username,
                "role": user.role,
                "jti": secrets.token_urlsafe(24),
                "exp": expires_at.replace(tzinfo=datetime.UTC),
            },
            self.settings.secret_key,
            algorithm=self.settings.encryption_algorithm
        )

        with atomic(self.db):
            self.db.add(models.UserSession(
                user_id=user.id,
                session_token=token,
                expires_at=expires_at
            ))

        return schemas.IssuedSession(token=token, expires_at=expires_at)

    def decode(self, token: str) -> dict:
        try:
            claims = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.encryption_algorithm]
            )
        except jwt.ExpiredSignatureError:
            raise SessionExpired()
        except jwt.PyJWTError:
            raise InvalidToken()

        if not all(key in claims for key in ("id", "username", "role")):
            raise InvalidToken()

        return claims

    def resolve(self, token: str) -> models.UserSession:
        self.decode(token)
        return self.lookup(token)

    def lookup(self, token: str) -> models.UserSession:
        """Ledger half of `resolve`, for callers that already decoded the token."""

        session = self.db.query(models.UserSession).filter(
            models.UserSession.session_token == token,
            models.UserSession.expires_at > utcnow()
        ).first()

        if not session:
            raise SessionExpired()

        return session

    def revoke(self, token: str) -> None:
        with atomic(self.db):
            self.db.query(models.UserSession).filter(
                models.UserSession.session_token == token
            ).delete(synchronize_session=False)

    def revoke_all(self, user_id: int) -> int:
        with atomic(self.db):
            revoked = self.db.query(models.UserSession).filter(
                models.UserSession.user_id == user_id
            ).delete(synchronize_session=False)

        logger.info(f"Revoked {revoked} session(s) for user {user_id}")
        return revoked
