import logging
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.auth.errors import AuthError, FieldViolation, InternalError, ValidationError
from backend.auth.secret_issuer import SecretIssuer
from backend.core import config
from backend.core.logging_config import configure_logging
from backend.database import engine
from backend.models import user
from backend.notifications.dispatcher import build_dispatcher
from backend.routes import auth_routes

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize() -> None:
    configure_logging()
    config.validate_runtime_config()

    app.state.secret_issuer = SecretIssuer(
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
        session_ttl=timedelta(days=config.SESSION_TOKEN_DAYS),
        verification_ttl=timedelta(hours=config.VERIFICATION_CODE_HOURS),
        reset_ttl=timedelta(hours=config.RESET_TOKEN_HOURS),
    )
    app.state.dispatcher = build_dispatcher()

    try:
        user.Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.exception_handler(AuthError)
async def handle_auth_error(_request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(Exception)
async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error while serving request', exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    violations = []
    for detail in exc.errors():
        location = [str(part) for part in detail.get('loc', ()) if part != 'body']
        violations.append(FieldViolation('.'.join(location) or 'body', detail.get('msg', 'Invalid value')))
    error = ValidationError(violations)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.get('/')
def root():
    return {'status': 'Auth API Running'}


app.include_router(auth_routes.router, prefix='/api/auth')
