import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from conduit.cache import cache
from conduit.config import settings
from conduit.domain import (
    AuthenticationError,
    AuthorizationError,
    DuplicateEntityError,
    EntityNotFoundError,
    ValidationError,
)
from conduit.log_config import setup_logging
from conduit.middleware import RequestTimingMiddleware
from conduit.routers import articles, profiles, tags, users
from conduit.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    await cache.connect()  # stays disabled when Redis is unreachable
    logger.info("Conduit API started (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await cache.disconnect()


app = FastAPI(
    title="Conduit API",
    description="Blogging platform backend: users, profiles, articles, comments and tags",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.token_service = TokenService(settings.JWT_SECRET, settings.JWT_SESSION_TIME)
app.state.password_hasher = PasswordHasher(settings.BCRYPT_ROUNDS)

# Middleware
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain errors -> {"errors": {...}}

def _errors(status_code: int, errors: dict[str, list[str]], headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": errors}, headers=headers)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _errors(422, exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][-1]) if error["loc"] else "body"
        errors.setdefault(field, []).append(error["msg"])
    return _errors(422, errors)


@app.exception_handler(EntityNotFoundError)
async def not_found_handler(request: Request, exc: EntityNotFoundError):
    return _errors(404, {exc.entity_type.lower(): ["not found"]})


@app.exception_handler(DuplicateEntityError)
async def duplicate_handler(request: Request, exc: DuplicateEntityError):
    return _errors(409, {exc.field: ["has already been taken"]})


@app.exception_handler(AuthenticationError)
async def authentication_handler(request: Request, exc: AuthenticationError):
    return _errors(401, {"credentials": [str(exc) or "invalid"]}, {"WWW-Authenticate": "Token"})


@app.exception_handler(AuthorizationError)
async def authorization_handler(request: Request, exc: AuthorizationError):
    logger.info("Forbidden %s %s: %s", request.method, request.url.path, exc)
    return _errors(403, {"permission": ["forbidden"]})


# Routers
app.include_router(users.router)
app.include_router(profiles.router)
app.include_router(articles.router)
app.include_router(tags.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": app.version, "cache": cache.stats}
