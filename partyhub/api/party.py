"""Party management API endpoints. All routes act on the logged-in author's parties."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from partyhub.api.deps import get_current_author, get_owned_guest, get_owned_party
from partyhub.config import settings
from partyhub.database import get_session
from partyhub.models.author import Author
from partyhub.models.guest import Guest
from partyhub.models.invitation import Invitation
from partyhub.models.party import Party
from partyhub.schemas.party import (
    PartyCreateResponse,
    PartyDetailResponse,
    PartyGuest,
    PartySummary,
    PartyUpdateRequest,
    StatusResponse,
)
from partyhub.services import notification_service
from partyhub.services.blocks import (
    BlockValidationError,
    attendance_block_id,
    parse_answers,
    parse_blocks,
    validate_blocks,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/party", tags=["party"])


def _party_to_summary(party: Party) -> PartySummary:
    return PartySummary(
        id=party.id,
        name=party.name,
        date=party.date,
        duration=party.duration,
        location=party.location,
        respond_until=party.respond_until,
        frozen=party.frozen,
        public=party.public,
        max_guests=party.max_guests,
        has_rsvp_block=party.has_rsvp_block,
    )


def _get_invitation(session: Session, party_id: str, guest_id: str) -> Invitation:
    invitation = session.exec(
        select(Invitation).where(
            Invitation.party_id == party_id,
            Invitation.guest_id == guest_id,
        )
    ).first()
    if not invitation:
        raise HTTPException(status_code=404, detail="Guest invitation not found")
    return invitation


@router.get("", response_model=list[PartySummary])
def list_parties(
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """List all parties of the current author."""
    parties = session.exec(select(Party).where(Party.author == author.id)).all()
    return [_party_to_summary(p) for p in parties]


@router.post("/new", response_model=PartyCreateResponse)
def create_party(
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Create an empty party with default values."""
    party = Party(author=author.id)
    session.add(party)
    session.commit()
    session.refresh(party)
    logger.info("Author %s created party %s", author.id, party.id)
    return PartyCreateResponse(party_id=party.id)


@router.get("/{party_id}", response_model=PartyDetailResponse)
def get_party(
    party_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Party details with its blocks and invited guests."""
    party = get_owned_party(session, party_id, author, read=True)
    blocks = parse_blocks(party.invitation_blocks)
    attendance_id = attendance_block_id(blocks)

    rows = session.exec(
        select(Guest, Invitation)
        .join(Invitation, Invitation.guest_id == Guest.id)
        .where(Invitation.party_id == party.id)
    ).all()

    guests = []
    for guest, invitation in rows:
        answers = parse_answers(invitation.invitation_block_answers)
        guests.append(
            PartyGuest(
                id=guest.id,
                salutation=guest.salutation,
                first=guest.first,
                last=guest.last,
                name=guest.full_name,
                organizer=invitation.organizer,
                invitation_id=invitation.id,
                selfcreated=guest.selfcreated,
                attendance=answers.get(attendance_id) if attendance_id else None,
            )
        )

    summary = _party_to_summary(party)
    return PartyDetailResponse(**summary.model_dump(), invitation_blocks=blocks, guests=guests)


@router.post("/{party_id}/update", response_model=StatusResponse)
def update_party(
    party_id: str,
    request: PartyUpdateRequest,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Save party settings and blocks. A changelog notifies all invited guests."""
    party = get_owned_party(session, party_id, author)

    if request.invitation_blocks is not None:
        try:
            blocks = validate_blocks(request.invitation_blocks)
        except BlockValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        party.invitation_blocks = json.dumps(blocks)
        party.has_rsvp_block = attendance_block_id(blocks) is not None

    party.name = request.name
    if request.date is not None:
        party.date = request.date
    if request.duration is not None:
        party.duration = request.duration
    if request.location is not None:
        party.location = request.location
    if request.respond_until is not None:
        party.respond_until = request.respond_until
    if request.frozen is not None:
        party.frozen = request.frozen
    if request.public is not None:
        party.public = request.public
    if request.max_guests is not None:
        if request.max_guests < 0:
            raise HTTPException(status_code=400, detail="max_guests must not be negative")
        party.max_guests = request.max_guests

    session.add(party)
    session.commit()

    changelog = (request.changelog or "").strip()[: settings.changelog_max_length]
    if changelog:
        guest_invitations = {
            inv.guest_id: inv.id
            for inv in session.exec(
                select(Invitation).where(Invitation.party_id == party.id)
            ).all()
        }
        notification_service.notify_party_update(session, party.name, changelog, guest_invitations)

    return StatusResponse(message="Party updated successfully")


@router.delete("/{party_id}/delete", response_model=StatusResponse)
def delete_party(
    party_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Delete a party together with its invitations."""
    party = get_owned_party(session, party_id, author)

    invitations = session.exec(
        select(Invitation).where(Invitation.party_id == party.id)
    ).all()
    for invitation in invitations:
        session.delete(invitation)
    session.flush()
    session.delete(party)
    session.commit()

    logger.info("Author %s deleted party %s", author.id, party_id)
    return StatusResponse(message="Party deleted successfully")


@router.post("/{party_id}/add/{guest_id}", response_model=StatusResponse)
def add_guest(
    party_id: str,
    guest_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Invite one of the author's guests and notify them."""
    party = get_owned_party(session, party_id, author)
    guest = get_owned_guest(session, guest_id, author)

    existing = session.exec(
        select(Invitation).where(
            Invitation.party_id == party.id,
            Invitation.guest_id == guest.id,
        )
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Guest is already invited to this party")

    invitation = Invitation(guest_id=guest.id, party_id=party.id)
    session.add(invitation)
    session.commit()
    session.refresh(invitation)

    notification_service.notify_invited(session, party.name, guest.id, invitation.id)
    return StatusResponse(message="Guest added to party")


@router.delete("/{party_id}/remove/{guest_id}", response_model=StatusResponse)
def remove_guest(
    party_id: str,
    guest_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    party = get_owned_party(session, party_id, author)
    invitation = _get_invitation(session, party.id, guest_id)
    session.delete(invitation)
    session.commit()
    return StatusResponse(message="Guest removed from party")


@router.post("/{party_id}/promote/{guest_id}", response_model=StatusResponse)
def promote_guest(
    party_id: str,
    guest_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    """Make an invited guest an organizer of the party."""
    party = get_owned_party(session, party_id, author)
    invitation = _get_invitation(session, party.id, guest_id)
    invitation.organizer = True
    session.add(invitation)
    session.commit()
    return StatusResponse(message="Guest promoted to organizer")


@router.post("/{party_id}/demote/{guest_id}", response_model=StatusResponse)
def demote_organizer(
    party_id: str,
    guest_id: str,
    author: Author = Depends(get_current_author),
    session: Session = Depends(get_session),
):
    party = get_owned_party(session, party_id, author)
    invitation = _get_invitation(session, party.id, guest_id)
    invitation.organizer = False
    session.add(invitation)
    session.commit()
    return StatusResponse(message="Organizer demoted to guest")
