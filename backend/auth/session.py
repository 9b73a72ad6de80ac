from backend.auth.errors import AuthError, Unauthenticated
from backend.auth.results import Err, Ok, Result
from backend.auth.secret_issuer import AccountIdentity, SecretIssuer


class SessionValidator:
    """Resolves the caller's identity from a presented session token.

    The bearer header wins over the session cookie when both are sent.
    """

    def __init__(self, issuer: SecretIssuer) -> None:
        self.issuer = issuer

    @staticmethod
    def extract_token(bearer: str | None, cookie: str | None) -> str:
        token = (bearer or '').strip() or (cookie or '').strip()
        if not token:
            raise Unauthenticated()
        return token

    def authenticate(self, bearer: str | None, cookie: str | None = None) -> Result[AccountIdentity]:
        try:
            token = self.extract_token(bearer, cookie)
            return Ok(self.issuer.verify_session_token(token))
        except AuthError as exc:
            return Err(exc)
