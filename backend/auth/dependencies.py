from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend.auth.errors import Forbidden
from backend.auth.results import Err
from backend.auth.secret_issuer import AccountIdentity, SecretIssuer
from backend.auth.service import AuthService
from backend.auth.session import SessionValidator
from backend.auth.store import CredentialStore
from backend.core import config
from backend.database import get_db
from backend.notifications.dispatcher import NotificationDispatcher

security = HTTPBearer(auto_error=False)


def get_secret_issuer(request: Request) -> SecretIssuer:
    return request.app.state.secret_issuer


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_auth_service(
    db: Session = Depends(get_db),
    issuer: SecretIssuer = Depends(get_secret_issuer),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> AuthService:
    return AuthService(CredentialStore(db), issuer, dispatcher, client_url=config.CLIENT_URL)


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    issuer: SecretIssuer = Depends(get_secret_issuer),
) -> AccountIdentity:
    bearer = credentials.credentials if credentials else None
    result = SessionValidator(issuer).authenticate(bearer, request.cookies.get(config.SESSION_COOKIE_NAME))
    if isinstance(result, Err):
        raise result.error
    return result.value


def require_roles(*roles: str):
    allowed = frozenset(roles)

    def check_role(identity: AccountIdentity = Depends(get_current_identity)) -> AccountIdentity:
        if identity.role not in allowed:
            raise Forbidden()
        return identity

    return check_role
