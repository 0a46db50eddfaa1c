from sqlalchemy import Column, ForeignKey, Integer, String, DateTime
from ..model_base import Base, utcnow

class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # lookup key only, deleting a user does not cascade here
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    session_token = Column(String(512), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f'<UserSession id={self.id} user_id={self.user_id} expires_at={self.expires_at}>'
