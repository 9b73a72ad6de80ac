"""Account lifecycle: signup, email verification, login and password reset.

Accounts are either unverified or verified; the reset flow runs alongside
either state. Each operation is a single unit of work against the credential
store and returns ``Ok(value)`` or ``Err(error)`` rather than raising.
"""

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

from backend.auth import validation
from backend.auth.errors import (
    AuthError,
    ConflictError,
    InternalError,
    InvalidCredentials,
    InvalidOrExpiredSecret,
    NotFound,
    ValidationError,
)
from backend.auth.passwords import burn_password_check, hash_password, verify_password
from backend.auth.results import Err, Ok, Result
from backend.auth.secret_issuer import AccountIdentity, SecretIssuer
from backend.auth.store import CredentialStore, to_public
from backend.core.logging_config import redact_email
from backend.notifications.dispatcher import NotificationDispatcher
from backend.schemas.auth import (
    AccountView,
    EmailRequest,
    LoginRequest,
    ResetPasswordRequest,
    SessionGrant,
    SignupRequest,
    VerifyEmailRequest,
)

logger = logging.getLogger(__name__)

CODE_ISSUE_ATTEMPTS = 5
INVALID_VERIFICATION_CODE = "Invalid or expired verification code"
INVALID_RESET_TOKEN = "Invalid or expired reset token"
UNKNOWN_EMAIL = "User not found with this email"


def _boundary(operation):
    @functools.wraps(operation)
    def wrapper(self, *args, **kwargs) -> Result:
        try:
            return Ok(operation(self, *args, **kwargs))
        except AuthError as exc:
            logger.info("%s rejected: %s (%s)", operation.__name__, type(exc).__name__, exc.message)
            return Err(exc)
        except SQLAlchemyError:
            logger.exception("%s failed against the credential store", operation.__name__)
            return Err(InternalError())
        except Exception:
            logger.exception("%s failed unexpectedly", operation.__name__)
            return Err(InternalError())

    return wrapper


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        issuer: SecretIssuer,
        dispatcher: NotificationDispatcher,
        *,
        client_url: str,
    ) -> None:
        self.store = store
        self.issuer = issuer
        self.dispatcher = dispatcher
        self.client_url = client_url.rstrip("/")

    def _now(self):
        return self.issuer.clock()

    def _fresh_verification_code(self):
        code, expires_at = self.issuer.issue_verification_code()
        attempts = 1
        while self.store.has_active_verification_code(code, self._now()) and attempts < CODE_ISSUE_ATTEMPTS:
            code, expires_at = self.issuer.issue_verification_code()
            attempts += 1
        return code, expires_at

    @_boundary
    def signup(self, request: SignupRequest) -> SessionGrant:
        violations = validation.check_signup(request.email, request.password, request.name, request.user_type)
        if violations:
            raise ValidationError(violations)
        if self.store.find_by_email(request.email) is not None:
            raise ConflictError()

        with self.store.transaction():
            code, expires_at = self._fresh_verification_code()
            user = self.store.create(
                email=request.email,
                hashed_password=hash_password(request.password),
                name=request.name,
                role=request.user_type,
                is_verified=False,
                verification_code=code,
                verification_code_expires_at=expires_at,
            )
            self.dispatcher.send_verification(user.email, code)

        logger.info("User signed up: %s", redact_email(user.email))
        token = self.issuer.issue_session_token(user.id, user.role)
        return SessionGrant(user=to_public(user), token=token)

    @_boundary
    def verify_email(self, request: VerifyEmailRequest) -> AccountView:
        violations = validation.check_code(request.code)
        if violations:
            raise ValidationError(violations)

        with self.store.transaction():
            user = self.store.find_by_verification_code(request.code, self._now())
            if user is None:
                raise InvalidOrExpiredSecret(INVALID_VERIFICATION_CODE)
            user.is_verified = True
            user.clear_verification_code()
            self.store.save(user)
            self.dispatcher.send_welcome(user.email, user.name)

        logger.info("Email verified: %s", redact_email(user.email))
        return to_public(user)

    @_boundary
    def resend_verification(self, request: EmailRequest) -> None:
        violations = validation.check_email(request.email)
        if violations:
            raise ValidationError(violations)

        with self.store.transaction():
            user = self.store.find_by_email(request.email)
            if user is None:
                raise NotFound(UNKNOWN_EMAIL)
            if user.is_verified:
                raise ConflictError("Email is already verified")
            code, expires_at = self._fresh_verification_code()
            user.set_verification_code(code, expires_at)
            self.store.save(user)
            self.dispatcher.send_verification(user.email, code)

        logger.info("Verification code reissued: %s", redact_email(user.email))

    @_boundary
    def login(self, request: LoginRequest) -> SessionGrant:
        violations = validation.check_login(request.email, request.password)
        if violations:
            raise ValidationError(violations)

        user = self.store.find_by_email(request.email)
        if user is None:
            burn_password_check(request.password)
            raise InvalidCredentials()
        if not verify_password(request.password, user.hashed_password):
            raise InvalidCredentials()

        # Unverified accounts may log in.
        with self.store.transaction():
            user.last_login = self._now()
            self.store.save(user)

        logger.info("User logged in: %s", redact_email(user.email))
        token = self.issuer.issue_session_token(user.id, user.role)
        return SessionGrant(user=to_public(user), token=token)

    @_boundary
    def logout(self) -> None:
        logger.info("User logged out")

    @_boundary
    def forgot_password(self, request: EmailRequest) -> None:
        violations = validation.check_email(request.email)
        if violations:
            raise ValidationError(violations)

        with self.store.transaction():
            user = self.store.find_by_email(request.email)
            if user is None:
                raise NotFound(UNKNOWN_EMAIL)
            token, expires_at = self.issuer.issue_reset_token()
            user.set_reset_token(token, expires_at)
            self.store.save(user)
            self.dispatcher.send_password_reset(user.email, self.reset_url(token))

        logger.info("Password reset requested: %s", redact_email(user.email))

    @_boundary
    def reset_password(self, token: str, request: ResetPasswordRequest) -> None:
        violations = validation.check_reset(request.password, request.confirm_password)
        if violations:
            raise ValidationError(violations)
        if not token:
            raise InvalidOrExpiredSecret(INVALID_RESET_TOKEN)

        with self.store.transaction():
            user = self.store.find_by_reset_token(token, self._now())
            if user is None:
                raise InvalidOrExpiredSecret(INVALID_RESET_TOKEN)
            user.hashed_password = hash_password(request.password)
            user.clear_reset_token()
            self.store.save(user)
            self.dispatcher.send_reset_success(user.email)

        logger.info("Password reset completed: %s", redact_email(user.email))

    @_boundary
    def check_auth(self, identity: AccountIdentity) -> AccountView:
        user = self.store.find_by_id(identity.account_id)
        if user is None:
            raise NotFound()
        return to_public(user)

    def reset_url(self, token: str) -> str:
        return f"{self.client_url}/reset-password/{token}"
