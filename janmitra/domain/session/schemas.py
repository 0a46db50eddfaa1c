from pydantic import BaseModel
from datetime import datetime

class IssuedSession(BaseModel):
    token: str
    expires_at: datetime

class Identity(BaseModel):
    """Caller resolved from a live session token."""
    user_id: int
    username: str
    role: str
