from sqlalchemy import Column, Integer, String, DateTime
from ..model_base import Base, utcnow

ROLES = ('admin', 'council', 'citizen')
STAFF_ROLES = ('admin', 'council')

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(63), unique=True, nullable=False, index=True)
    email = Column(String(127), unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(15), nullable=False, default='citizen')
    full_name = Column(String(127), nullable=True)
    phone = Column(String(31), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def __str__(self):
        return f'id - {self.id} username - {self.username} role - {self.role}'
