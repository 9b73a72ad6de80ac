import pytest

from backend.auth import validation
from backend.auth.errors import FieldViolation


def _fields(violations: list[FieldViolation]) -> list[str]:
    return [violation.field for violation in violations]


def test_check_signup_accepts_valid_input() -> None:
    assert validation.check_signup('a@x.com', 'secret1', 'A', 'student') == []


def test_check_signup_reports_every_violation() -> None:
    violations = validation.check_signup('invalidemail', '', '', '')

    assert _fields(violations) == ['email', 'password', 'name', 'userType']


@pytest.mark.parametrize('role', ['admin', 'Student', ''])
def test_check_signup_rejects_roles_outside_the_closed_set(role: str) -> None:
    assert _fields(validation.check_signup('a@x.com', 'secret1', 'A', role)) == ['userType']


def test_check_password_enforces_minimum_length() -> None:
    assert _fields(validation.check_password('12345')) == ['password']
    assert validation.check_password('123456') == []


def test_check_password_rejects_passwords_bcrypt_would_truncate() -> None:
    assert _fields(validation.check_password('x' * 73)) == ['password']
    assert validation.check_password('x' * 72) == []


def test_check_reset_reports_mismatch() -> None:
    violations = validation.check_reset('secret1', 'secret2')

    assert violations == [FieldViolation('confirmPassword', 'Passwords do not match')]


def test_check_reset_reports_short_password_and_mismatch_together() -> None:
    assert _fields(validation.check_reset('abc', 'abd')) == ['password', 'confirmPassword']


def test_check_login_requires_password() -> None:
    assert _fields(validation.check_login('a@x.com', '')) == ['password']


def test_check_code_requires_value() -> None:
    assert _fields(validation.check_code('')) == ['code']


@pytest.mark.parametrize('email', ['josé@example.com', 'ñandú@x.com'])
def test_check_email_rejects_addresses_needing_smtputf8(email: str) -> None:
    assert _fields(validation.check_email(email)) == ['email']
