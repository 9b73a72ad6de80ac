from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from backend.auth.dependencies import get_auth_service, get_current_identity
from backend.auth.errors import AuthError
from backend.auth.results import Err, Result
from backend.auth.secret_issuer import AccountIdentity
from backend.auth.service import AuthService
from backend.core import config
from backend.schemas.auth import (
    AccountView,
    EmailRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    VerifyEmailRequest,
)

router = APIRouter(tags=['auth'])

SESSION_COOKIE_MAX_AGE = config.SESSION_TOKEN_DAYS * 24 * 60 * 60


def error_response(error: AuthError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_body())


def user_body(user: AccountView) -> dict:
    return user.model_dump(mode='json', by_alias=True)


def message_response(result: Result, message: str) -> JSONResponse:
    if isinstance(result, Err):
        return error_response(result.error)
    return JSONResponse(status_code=status.HTTP_200_OK, content={'success': True, 'message': message})


def set_session_cookie(response: JSONResponse, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_COOKIE_MAX_AGE,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='strict',
    )


def clear_session_cookie(response: JSONResponse) -> None:
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='strict',
    )


@router.post('/signup')
def signup(payload: SignupRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    result = service.signup(payload)
    if isinstance(result, Err):
        return error_response(result.error)

    response = JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={'success': True, 'message': 'User created successfully', 'user': user_body(result.value.user)},
    )
    set_session_cookie(response, result.value.token)
    return response


@router.post('/verify-email')
def verify_email(payload: VerifyEmailRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    return message_response(service.verify_email(payload), 'Email verified successfully')


@router.post('/resend-verification')
def resend_verification(payload: EmailRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    return message_response(service.resend_verification(payload), 'Verification code sent to your email')


@router.post('/login')
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    result = service.login(payload)
    if isinstance(result, Err):
        return error_response(result.error)

    response = JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'success': True, 'message': 'Logged in successfully', 'user': user_body(result.value.user)},
    )
    set_session_cookie(response, result.value.token)
    return response


@router.post('/logout')
def logout(service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    response = message_response(service.logout(), 'Logged out successfully')
    clear_session_cookie(response)
    return response


@router.post('/forgot-password')
def forgot_password(payload: EmailRequest, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    return message_response(service.forgot_password(payload), 'Password reset link sent to your email')


@router.put('/reset-password/{token}')
def reset_password(
    token: str,
    payload: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    return message_response(service.reset_password(token, payload), 'Password reset successful')


@router.get('/check-auth')
def check_auth(
    identity: AccountIdentity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    result = service.check_auth(identity)
    if isinstance(result, Err):
        return error_response(result.error)
    return JSONResponse(status_code=status.HTTP_200_OK, content={'success': True, 'user': user_body(result.value)})
