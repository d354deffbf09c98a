"""Guest management API endpoints, plus self-registration for public parties."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, col, select

from partyhub.api.deps import get_current_author, get_owned_guest
from partyhub.database import get_session
from partyhub.models.author import Author
from partyhub.models.guest import Guest
from partyhub.models.invitation import Invitation
from partyhub.models.party import Party
from partyhub.models.push import GuestSubscription
from partyhub.schemas.guest import (
    GuestCreateResponse,
    GuestRequest,
    GuestResponse,
    PublicGuestRequest,
    PublicGuestResponse,
)
from partyhub.schemas.party import StatusResponse
from partyhub.services.invitation_service import InvitationClosedError, register_public_guest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guest", tags=["guest"])


def _guest_to_response(guest: Guest) -> GuestResponse:
    return GuestResponse(
        id=guest.id,
        salutation=guest.salutation,
        first=guest.first,
        last=guest.last,
        email=guest.email,
        note=guest.note,
        selfcreated=guest.selfcreated,
    )


def _apply(guest: Guest, request: GuestRequest) -> None:
    guest.salutation = request.salutation.strip()
    guest.first = request.first.strip()
    guest.last = request.last.strip()
    guest.email = request.email.strip()
    guest.note = request.note


@router.get("", response_model=list[GuestResponse])
def list_guests(
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """List all guests of the current author."""
    guests = session.exec(
        select(Guest)
        .where(Guest.author == author.id)
        .order_by(col(Guest.first), col(Guest.last))
    ).all()
    return [_guest_to_response(g) for g in guests]


@router.post("/new", response_model=GuestCreateResponse)
def create_guest(
    request: GuestRequest,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    guest = Guest(author=author.id)
    _apply(guest, request)
    session.add(guest)
    session.commit()
    session.refresh(guest)
    return GuestCreateResponse(guest_id=guest.id)


@router.post("/public_guest/{party_id}", response_model=PublicGuestResponse)
def public_guest(
    party_id: str,
    request: PublicGuestRequest,
    session: Session = Depends(get_session),
):
    """Register yourself for a public party. No auth required."""
    if not request.first.strip():
        raise HTTPException(status_code=400, detail="First name is required")

    party = session.get(Party, party_id)
    if party is None or not party.public:
        raise HTTPException(status_code=404, detail="Party not found")

    try:
        invitation = register_public_guest(
            session,
            party,
            salutation=request.salutation,
            first=request.first,
            last=request.last,
            email=request.email,
        )
    except InvitationClosedError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return PublicGuestResponse(guest_id=invitation.guest_id, invitation_id=invitation.id)


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(
    guest_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    return _guest_to_response(get_owned_guest(session, guest_id, author))


@router.post("/{guest_id}/update", response_model=StatusResponse)
def update_guest(
    guest_id: str,
    request: GuestRequest,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    guest = get_owned_guest(session, guest_id, author)
    _apply(guest, request)
    session.add(guest)
    session.commit()
    return StatusResponse(message="Guest updated successfully")


@router.delete("/{guest_id}/delete", response_model=StatusResponse)
def delete_guest(
    guest_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Delete a guest with their invitations and push subscription links."""
    guest = get_owned_guest(session, guest_id, author)

    for invitation in session.exec(
        select(Invitation).where(Invitation.guest_id == guest.id)
    ).all():
        session.delete(invitation)
    for link in session.exec(
        select(GuestSubscription).where(GuestSubscription.guest_id == guest.id)
    ).all():
        session.delete(link)
    session.flush()
    session.delete(guest)
    session.commit()

    logger.info("Author %s deleted guest %s", author.id, guest_id)
    return StatusResponse(message="Guest deleted successfully")
