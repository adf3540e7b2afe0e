from typing import Optional

from pydantic import BaseModel, Field


class LoginPayload(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminUserRead(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    fullName: str
    active: bool
    createdAt: Optional[str] = None
