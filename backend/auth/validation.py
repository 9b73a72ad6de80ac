from email_validator import EmailNotValidError, validate_email

from backend.auth.errors import FieldViolation
from backend.auth.passwords import MAX_PASSWORD_BYTES
from backend.models.user import ROLES

MIN_PASSWORD_LENGTH = 6


def check_email(email: str, field: str = "email") -> list[FieldViolation]:
    if not email:
        return [FieldViolation(field, "Email is required")]
    try:
        validate_email(email, check_deliverability=False, allow_smtputf8=False)
    except EmailNotValidError:
        return [FieldViolation(field, "Please provide a valid email address")]
    return []


def check_password(password: str, field: str = "password") -> list[FieldViolation]:
    if len(password) < MIN_PASSWORD_LENGTH:
        return [FieldViolation(field, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")]
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return [FieldViolation(field, f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")]
    return []


def check_signup(email: str, password: str, name: str, role: str) -> list[FieldViolation]:
    violations = check_email(email)
    violations += check_password(password)
    if not name:
        violations.append(FieldViolation("name", "Name is required"))
    if role not in ROLES:
        allowed = ", ".join(sorted(ROLES))
        violations.append(FieldViolation("userType", f"User type must be one of: {allowed}"))
    return violations


def check_login(email: str, password: str) -> list[FieldViolation]:
    violations = check_email(email)
    if not password:
        violations.append(FieldViolation("password", "Password is required"))
    return violations


def check_reset(password: str, confirm_password: str) -> list[FieldViolation]:
    violations = check_password(password)
    if confirm_password != password:
        violations.append(FieldViolation("confirmPassword", "Passwords do not match"))
    return violations


def check_code(code: str) -> list[FieldViolation]:
    if not code:
        return [FieldViolation("code", "Verification code is required")]
    return []
