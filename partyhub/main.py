"""Party Hub Server - FastAPI Application Entry Point."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from partyhub.config import settings
from partyhub.database import init_db

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_startup() -> None:
    """Report the deployment mode and which email transport is active."""
    logger.info("Starting Party Hub server on http://%s:%d", settings.host, settings.port)
    if settings.is_dev:
        logger.info("Running in dev mode")
    else:
        logger.warning(
            "Running in production mode. Session cookies are Secure and need HTTPS "
            "(set ENV=dev for local testing)."
        )

    if settings.mail_sendtype not in (None, "client", "direct"):
        logger.warning("Invalid MAIL_SENDTYPE '%s'. Use 'client' or 'direct'.", settings.mail_sendtype)

    method = settings.mail_method
    if method == "client":
        logger.info("Email notifications enabled via SMTP client")
    elif method == "direct":
        logger.info("Email notifications enabled via direct SMTP")
        logger.info("Make sure your domain has proper SPF/DKIM/DMARC records configured.")
    elif settings.mail_sendtype == "client":
        logger.warning(
            "MAIL_SENDTYPE is 'client' but SMTP client not configured. "
            "Set SMTP_SERVER, SMTP_USERNAME, SMTP_PASSWORD and SMTP_FROM."
        )
    elif settings.mail_sendtype == "direct":
        logger.warning("MAIL_SENDTYPE is 'direct' but SMTP_FROM is not set.")
    else:
        logger.warning(
            "Email notifications disabled. Set SMTP_SERVER, SMTP_USERNAME, SMTP_PASSWORD "
            "and SMTP_FROM for the SMTP client, or SMTP_FROM for direct SMTP."
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize logging and database on startup."""
    setup_logging()
    init_db()
    log_startup()
    yield


app = FastAPI(
    title="Party Hub",
    description="Party invitations, RSVPs and guest notifications",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError):
    """Database failures are logged server-side and reported as a generic 500."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


# --- Register routers ---
from partyhub.api.auth import router as auth_router  # noqa: E402
from partyhub.api.guest import router as guest_router  # noqa: E402
from partyhub.api.invitation import router as invitation_router  # noqa: E402
from partyhub.api.notification import router as notification_router  # noqa: E402
from partyhub.api.pages import invitation_page, router as pages_router  # noqa: E402
from partyhub.api.party import router as party_router  # noqa: E402

app.include_router(pages_router)
app.include_router(auth_router)
app.include_router(party_router)
app.include_router(guest_router)
app.include_router(invitation_router)
app.include_router(notification_router)

app.mount("/static", StaticFiles(directory=str(settings.web_dir / "static")), name="static")

# Matches any single path segment, so it goes last.
app.add_api_route("/{invitation_id}", invitation_page, methods=["GET"], tags=["pages"])
