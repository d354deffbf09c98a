"""Author login and logout."""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlmodel import Session, select

from partyhub.api.pages import render_page
from partyhub.config import settings
from partyhub.database import get_session
from partyhub.models.author import Author
from partyhub.utils.security import create_session_token, session_expiry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("")
def auth_page(request: Request):
    """Login form."""
    return render_page("auth", request)


@router.post("")
def login(
    author_secret: str = Form(..., alias="author-secret"),
    session: Session = Depends(get_session),
):
    """Exchange an author secret for a long-lived session cookie."""
    author = session.exec(
        select(Author).where(Author.author_secret == author_secret)
    ).first()
    if author is None:
        logger.info("Rejected login attempt")
        return RedirectResponse("/auth?error=invalid", status_code=302)

    response = RedirectResponse("/", status_code=302)
    response.set_cookie(
        settings.cookie_name,
        create_session_token(author.id),
        expires=session_expiry(),
        path="/",
        httponly=True,
        samesite="lax",
        secure=not settings.is_dev,
    )
    logger.info("Author %s logged in", author.id)
    return response


@router.post("/logout")
def logout():
    response = RedirectResponse("/auth", status_code=302)
    response.delete_cookie(settings.cookie_name, path="/")
    return response
