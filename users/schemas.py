from typing import Optional

from pydantic import Field, field_validator

from app.schemas import PatchModel
from auth.schemas import UserRegister, check_email, check_password


class UserCreate(UserRegister):
    """Admin-side user creation; unlike registration it may grant admin rights."""
    is_admin: bool = False


class UserPatch(PatchModel):
    not_null = ('first_name', 'last_name', 'email', 'password')

    password: Optional[str] = None
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = None
    picture: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=500)

    @field_validator('email')
    @classmethod
    def valid_email(cls, value):
        return value if value is None else check_email(value)

    @field_validator('password')
    @classmethod
    def valid_password(cls, value):
        return value if value is None else check_password(value)
