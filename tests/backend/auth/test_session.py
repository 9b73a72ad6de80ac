import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from backend.auth.dependencies import get_current_identity, require_roles
from backend.auth.errors import Forbidden, InvalidToken, Unauthenticated
from backend.auth.results import Err, Ok
from backend.auth.secret_issuer import AccountIdentity
from backend.auth.session import SessionValidator


def _request(cookie: str | None = None) -> Request:
    headers = [(b'cookie', f'token={cookie}'.encode())] if cookie else []
    return Request({'type': 'http', 'method': 'GET', 'path': '/', 'headers': headers})


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_authenticate_accepts_bearer_token(issuer) -> None:
    token = issuer.issue_session_token(3, 'student')

    assert SessionValidator(issuer).authenticate(token) == Ok(AccountIdentity(account_id=3, role='student'))


def test_authenticate_falls_back_to_cookie(issuer) -> None:
    token = issuer.issue_session_token(4, 'teacher')

    result = SessionValidator(issuer).authenticate(None, token)

    assert isinstance(result, Ok)
    assert result.value.account_id == 4


def test_authenticate_prefers_bearer_over_cookie(issuer) -> None:
    bearer = issuer.issue_session_token(5, 'student')
    cookie = issuer.issue_session_token(6, 'student')

    assert SessionValidator(issuer).authenticate(bearer, cookie).value.account_id == 5


def test_missing_token_is_distinct_from_invalid_token(issuer) -> None:
    missing = SessionValidator(issuer).authenticate(None, None)
    invalid = SessionValidator(issuer).authenticate('garbage')

    assert isinstance(missing, Err)
    assert isinstance(missing.error, Unauthenticated)
    assert missing.error.status_code == 401
    assert isinstance(invalid, Err)
    assert isinstance(invalid.error, InvalidToken)
    assert invalid.error.status_code == 400


def test_get_current_identity_reads_bearer_credentials(issuer) -> None:
    token = issuer.issue_session_token(8, 'teacher')

    identity = get_current_identity(request=_request(), credentials=_bearer(token), issuer=issuer)

    assert identity == AccountIdentity(account_id=8, role='teacher')


def test_get_current_identity_reads_session_cookie(issuer) -> None:
    token = issuer.issue_session_token(9, 'student')

    identity = get_current_identity(request=_request(cookie=token), credentials=None, issuer=issuer)

    assert identity.account_id == 9


def test_get_current_identity_raises_without_token(issuer) -> None:
    with pytest.raises(Unauthenticated) as exception_info:
        get_current_identity(request=_request(), credentials=None, issuer=issuer)

    assert exception_info.value.message == 'Unauthorized - no token provided'


def test_get_current_identity_raises_for_expired_token(issuer, clock) -> None:
    token = issuer.issue_session_token(9, 'student')
    clock.advance(days=8)

    with pytest.raises(InvalidToken):
        get_current_identity(request=_request(), credentials=_bearer(token), issuer=issuer)


def test_require_roles_allows_listed_role() -> None:
    check_role = require_roles('teacher')
    identity = AccountIdentity(account_id=1, role='teacher')

    assert check_role(identity=identity) is identity


def test_require_roles_rejects_other_roles() -> None:
    check_role = require_roles('teacher')

    with pytest.raises(Forbidden) as exception_info:
        check_role(identity=AccountIdentity(account_id=1, role='student'))

    assert exception_info.value.status_code == 403
