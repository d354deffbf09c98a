"""Common API dependencies: current author extraction, ownership checks."""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, select

from partyhub.config import settings
from partyhub.database import get_session
from partyhub.models.author import Author
from partyhub.models.guest import Guest
from partyhub.models.party import Party
from partyhub.utils.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


def _author_from_cookie(request: Request, session: Session) -> Optional[Author]:
    token = request.cookies.get(settings.cookie_name)
    if not token:
        return None
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        return None
    if payload.get("type") != "session":
        return None
    return session.get(Author, payload.get("sub", ""))


def _author_from_bearer(
    credentials: Optional[HTTPAuthorizationCredentials], session: Session
) -> Optional[Author]:
    if credentials is None or not credentials.credentials:
        return None
    return session.exec(
        select(Author).where(Author.author_secret == credentials.credentials)
    ).first()


def get_optional_author(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Optional[Author]:
    """The logged-in author from the session cookie or a bearer secret, if any."""
    return _author_from_cookie(request, session) or _author_from_bearer(credentials, session)


def get_current_author(author: Optional[Author] = Depends(get_optional_author)) -> Author:
    if author is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return author


def get_owned_party(session: Session, party_id: str, author: Author, *, read: bool = False) -> Party:
    """Load a party of this author. Foreign parties are 404 on reads and 403 on mutations."""
    party = session.get(Party, party_id)
    if party is None or party.author != author.id:
        if read:
            raise HTTPException(status_code=404, detail="Party not found or access denied")
        raise HTTPException(status_code=403, detail="Party not found or access denied")
    return party


def get_owned_guest(session: Session, guest_id: str, author: Author) -> Guest:
    guest = session.get(Guest, guest_id)
    if guest is None or guest.author != author.id:
        raise HTTPException(status_code=404, detail="Guest not found or does not belong to you")
    return guest
