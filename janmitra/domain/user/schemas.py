from pydantic import BaseModel, ConfigDict, constr
from datetime import datetime
from typing import Literal

Role = Literal['admin', 'council', 'citizen']

class UserBase(BaseModel):
    username: constr(min_length=1, max_length=63)
    email: constr(min_length=3, max_length=127)
    full_name: str | None = None
    phone: str | None = None

class UserCreate(UserBase):
    password: constr(min_length=1)
    role: Role = 'admin'

class UserOut(UserBase):
    id: int
    role: Role

    model_config = ConfigDict(from_attributes=True)

class UserDetail(UserOut):
    created_at: datetime
    updated_at: datetime

class LoginBody(BaseModel):
    username: constr(min_length=1)
    password: constr(min_length=1)
    role: Role | None = None

class PasswordChangeBody(BaseModel):
    current_password: constr(min_length=1)
    new_password: constr(min_length=1)
