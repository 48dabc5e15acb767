from datetime import date
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from ..enums import Theme

Username = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, min_length=3, max_length=20, pattern=r"^[A-Za-z0-9_]+$"
    ),
]
Password = Annotated[str, StringConstraints(min_length=6, max_length=72)]


class ProfileFields(BaseModel):
    first_name: Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)] | None = None
    last_name: Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)] | None = None
    avatar: str | None = None
    bio: Annotated[str, StringConstraints(max_length=500)] | None = None
    country: Annotated[str, StringConstraints(strip_whitespace=True)] | None = None
    date_of_birth: date | None = None


class PreferenceFields(BaseModel):
    theme: Theme | None = None
    sound_enabled: bool | None = None
    show_wpm: bool | None = None
    show_accuracy: bool | None = None


class RegisterRequest(BaseModel):
    username: Username
    email: EmailStr
    password: Password
    profile: ProfileFields = Field(default_factory=ProfileFields)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    """
    - login: username or email
    """

    login: str | None = None
    password: str | None = None


class UpdateProfileRequest(BaseModel):
    """
    only fields present in the body are updated
    """

    profile: ProfileFields | None = None
    preferences: PreferenceFields | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str | None = None
    new_password: Password | None = None


class DeleteAccountRequest(BaseModel):
    password: str | None = None
