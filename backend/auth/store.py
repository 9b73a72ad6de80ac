from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth.errors import ConflictError
from backend.models.user import User
from backend.schemas.auth import AccountView


class CredentialStore:
    """Account persistence over one SQLAlchemy session.

    Mutations are staged with ``create``/``save`` and made durable by the
    enclosing ``transaction()``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, account_id: int) -> User | None:
        return self.db.get(User, account_id)

    def find_by_verification_code(self, code: str, now: datetime) -> User | None:
        return (
            self.db.query(User)
            .filter(
                User.verification_code == code,
                User.verification_code_expires_at > now,
            )
            .first()
        )

    def has_active_verification_code(self, code: str, now: datetime) -> bool:
        return self.find_by_verification_code(code, now) is not None

    def find_by_reset_token(self, token: str, now: datetime) -> User | None:
        return (
            self.db.query(User)
            .filter(
                User.reset_password_token == token,
                User.reset_password_expires_at > now,
            )
            .first()
        )

    def create(self, **fields) -> User:
        if self.find_by_email(fields['email']) is not None:
            raise ConflictError()
        user = User(**fields)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as exc:
            raise ConflictError() from exc
        return user

    def save(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def to_public(user: User) -> AccountView:
    return AccountView.model_validate(user)
