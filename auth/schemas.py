from typing import Optional

from pydantic import Field, field_validator

from app.schemas import RequestModel
from auth.utils import validate_email, validate_password


def check_email(value):
    ok, error = validate_email(value)
    if not ok:
        raise ValueError(error)
    return value


def check_password(value):
    ok, error = validate_password(value)
    if not ok:
        raise ValueError(error)
    return value


class UserAuth(RequestModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserRegister(RequestModel):
    username: str = Field(min_length=2, max_length=25)
    password: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str
    picture: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=500)

    @field_validator('email')
    @classmethod
    def valid_email(cls, value):
        return check_email(value)

    @field_validator('password')
    @classmethod
    def valid_password(cls, value):
        return check_password(value)
