from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator

from app.constants import USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH
from app.schemas.common import CamelModel, Pagination, as_utc


def _clean_username(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValueError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(value) > USERNAME_MAX_LENGTH:
        raise ValueError(f"Username cannot exceed {USERNAME_MAX_LENGTH} characters")
    return value


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class UserCreate(CamelModel):
    username: str
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_length(cls, v):
        return _clean_username(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        return _strip(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class UserUpdate(CamelModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)

    @field_validator("username")
    @classmethod
    def username_length(cls, v):
        return _clean_username(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower() if v else v

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        return _strip(v)


# For embedding in task responses
class UserSummary(CamelModel):
    id: int
    username: str
    email: str


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_serializer("last_login", "created_at", "updated_at")
    def serialize_utc(self, value):
        return as_utc(value)


class UserListOut(CamelModel):
    users: List[UserOut]
    pagination: Pagination


class ProfileUpdateOut(CamelModel):
    message: str
    user: UserOut
