"""Issues the time-bounded secrets used by the authentication flows.

Verification codes and reset tokens are opaque random values persisted on the
account. Session tokens are stateless JWTs signed with the process-wide key the
issuer is constructed with.
"""

import secrets
from calendar import timegm
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

import jwt

from backend.auth.errors import InvalidToken
from backend.core.clock import utcnow
from backend.models.user import ROLES

VERIFICATION_CODE_LOW = 100000
VERIFICATION_CODE_SPAN = 900000
RESET_TOKEN_BYTES = 20


@dataclass(frozen=True)
class AccountIdentity:
    account_id: int
    role: str


class SecretIssuer:
    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        session_ttl: timedelta = timedelta(days=7),
        verification_ttl: timedelta = timedelta(hours=24),
        reset_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("A signing key is required.")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.session_ttl = session_ttl
        self.verification_ttl = verification_ttl
        self.reset_ttl = reset_ttl
        self.clock = clock

    def issue_verification_code(self) -> tuple[str, datetime]:
        code = str(VERIFICATION_CODE_LOW + secrets.randbelow(VERIFICATION_CODE_SPAN))
        return code, self.clock() + self.verification_ttl

    def issue_reset_token(self) -> tuple[str, datetime]:
        return secrets.token_hex(RESET_TOKEN_BYTES), self.clock() + self.reset_ttl

    def issue_session_token(self, account_id: int, role: str) -> str:
        issued_at = self.clock()
        payload = {
            "sub": str(account_id),
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self.session_ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify_session_token(self, token: str) -> AccountIdentity:
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={
                    "require": ["sub", "role", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            raise InvalidToken() from exc

        # Expiry is judged by the same clock that stamped the token.
        expires_at = payload["exp"]
        if not isinstance(expires_at, (int, float)) or expires_at <= timegm(self.clock().utctimetuple()):
            raise InvalidToken()

        role = payload.get("role")
        if role not in ROLES:
            raise InvalidToken()
        try:
            account_id = int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidToken() from exc
        return AccountIdentity(account_id=account_id, role=role)
