"""User model definitions."""

import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from backend.core.clock import utcnow
from backend.database import Base


class Role(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"


ROLES = frozenset(role.value for role in Role)


class User(Base):
    """A registered account together with its pending verification and reset secrets."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    role = Column(String, nullable=False)  # student/teacher
    is_verified = Column(Boolean, nullable=False, default=False)
    last_login = Column(DateTime, default=utcnow)

    verification_code = Column(String, index=True)
    verification_code_expires_at = Column(DateTime)
    reset_password_token = Column(String, index=True)
    reset_password_expires_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def set_verification_code(self, code, expires_at) -> None:
        self.verification_code = code
        self.verification_code_expires_at = expires_at

    def clear_verification_code(self) -> None:
        self.verification_code = None
        self.verification_code_expires_at = None

    def set_reset_token(self, token, expires_at) -> None:
        self.reset_password_token = token
        self.reset_password_expires_at = expires_at

    def clear_reset_token(self) -> None:
        self.reset_password_token = None
        self.reset_password_expires_at = None

    @property
    def state(self) -> str:
        return "verified" if self.is_verified else "unverified"
