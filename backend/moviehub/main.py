"""FastAPI application entry point."""
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from moviehub.config import settings
from moviehub.database import Base, engine
from moviehub.errors import DomainError

# Import routers
from moviehub.routers import auth, users, favorites, reviews, groups

# Import all models so Base.metadata knows about them
from moviehub.models.user import User                                # noqa: F401
from moviehub.models.group import Group, GroupMember, GroupContent   # noqa: F401
from moviehub.models.join_request import JoinRequest                 # noqa: F401
from moviehub.models.favorite import Favorite                        # noqa: F401
from moviehub.models.review import Review                            # noqa: F401

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_HTTP_ERROR_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


def _configure_logging() -> None:
    """Send application logs to stdout, unless the host process already set up root handlers."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(stdout_handler)
    root_logger.setLevel(settings.LOG_LEVEL.upper())
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


_configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="MovieHub",
    description="Movie groups, favorites and reviews",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code, "message": message},
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return _error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body/query/path validation failures use the same 400 envelope as domain validation."""
    errors = exc.errors()
    missing = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing" and e.get("loc")]
    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    elif errors:
        first = errors[0]
        field = str(first["loc"][-1]) if first.get("loc") else "request"
        message = f"Invalid value for {field}: {first.get('msg', 'invalid input')}"
    else:
        message = "Invalid request"
    return _error_response(400, "validation_error", message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    return _error_response(exc.status_code, code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "Internal server error")


# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(favorites.router, prefix="/api/favorites", tags=["Favorites"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(reviews.movie_router, prefix="/api/movies", tags=["Reviews"])
app.include_router(groups.router, prefix="/api/groups", tags=["Groups"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
