"""Request and response bodies for the auth routes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = ''
    password: str = ''
    name: str = ''
    user_type: str = Field('', alias='userType')

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('name', 'user_type')
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class LoginRequest(BaseModel):
    email: str = ''
    password: str = ''

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class EmailRequest(BaseModel):
    email: str = ''

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class VerifyEmailRequest(BaseModel):
    code: str = ''

    @field_validator('code', mode='before')
    @classmethod
    def coerce_code(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        return value.strip() if isinstance(value, str) else value


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str = ''
    confirm_password: str = Field('', alias='confirmPassword')


class AccountView(BaseModel):
    """Outward projection of an account: no password hash, no pending secrets."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    name: str
    user_type: str = Field(alias='userType', validation_alias='role')
    is_verified: bool = Field(alias='isVerified', validation_alias='is_verified')
    last_login: datetime | None = Field(default=None, alias='lastLogin', validation_alias='last_login')
    created_at: datetime | None = Field(default=None, alias='createdAt', validation_alias='created_at')
    updated_at: datetime | None = Field(default=None, alias='updatedAt', validation_alias='updated_at')


class SessionGrant(BaseModel):
    user: AccountView
    token: str
