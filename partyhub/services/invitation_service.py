"""Invitation business logic: detail view, answer saving, public registration."""

import json
import logging
from datetime import date, datetime, time
from typing import Any, Optional

from sqlmodel import Session, select

from partyhub.models.guest import Guest
from partyhub.models.invitation import Invitation
from partyhub.models.party import Party
from partyhub.services.blocks import (
    attendance_block_id,
    block_ids,
    is_attending,
    parse_answers,
    parse_blocks,
)
from partyhub.services.visibility import OtherAnswers, count_attending, filter_other_answers

logger = logging.getLogger(__name__)


class InvitationClosedError(ValueError):
    """The party no longer accepts responses (frozen or past the deadline)."""


class PartyFullError(ValueError):
    """Accepting another "yes" would exceed the party's guest cap."""


# --- Dates ---

def parse_party_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO date or datetime. A bare date is taken as midnight."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def parse_deadline(value: str) -> Optional[datetime]:
    """Parse ``respond_until``. A bare date lasts until the end of that day."""
    if not value:
        return None
    try:
        if "T" not in value and " " not in value.strip():
            return datetime.combine(date.fromisoformat(value.strip()), time.max)
        return datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Ignoring unparseable deadline %r", value)
        return None


def deadline_passed(party: Party, now: Optional[datetime] = None) -> bool:
    deadline = parse_deadline(party.respond_until)
    if deadline is None:
        return False
    if now is None:
        now = datetime.now(deadline.tzinfo) if deadline.tzinfo else datetime.now()
    return now > deadline


def ensure_open(party: Party) -> None:
    if party.frozen:
        raise InvitationClosedError("Party is frozen, responses can no longer be changed")
    if deadline_passed(party):
        raise InvitationClosedError("The response deadline has passed")


# --- Queries ---

def party_answer_rows(session: Session, party_id: str) -> list[OtherAnswers]:
    """All invitations of a party with their guest's display name."""
    rows = session.exec(
        select(Invitation, Guest)
        .join(Guest, Invitation.guest_id == Guest.id)
        .where(Invitation.party_id == party_id)
    ).all()
    return [
        OtherAnswers(
            invitation_id=inv.id,
            answers=inv.invitation_block_answers,
            guest_name=guest.full_name,
        )
        for inv, guest in rows
    ]


def attending_count(blocks: list[dict], rows: list[OtherAnswers]) -> int:
    return count_attending(blocks, [r.answers for r in rows])


def party_info(party: Party, blocks: list[dict], rows: list[OtherAnswers]) -> dict:
    return {
        "id": party.id,
        "name": party.name,
        "date": party.date,
        "duration": party.duration,
        "location": party.location,
        "respond_until": party.respond_until,
        "frozen": party.frozen,
        "max_guests": party.max_guests,
        "has_rsvp_block": party.has_rsvp_block,
        "attending_count": attending_count(blocks, rows),
        "deadline_passed": deadline_passed(party),
    }


# --- Operations ---

def invitation_details(session: Session, invitation: Invitation) -> dict:
    """Everything the invitation page needs, with other answers filtered for this viewer."""
    guest = session.get(Guest, invitation.guest_id)
    party = session.get(Party, invitation.party_id)
    if guest is None or party is None:
        raise LookupError("Invitation references a missing guest or party")

    blocks = parse_blocks(party.invitation_blocks)
    rows = party_answer_rows(session, party.id)

    return {
        "invitation_blocks": blocks,
        "invitation_block_answers": parse_answers(invitation.invitation_block_answers),
        "other_guests_answers": filter_other_answers(
            blocks,
            rows,
            organizer=invitation.organizer,
            viewer_invitation_id=invitation.id,
        ),
        "guest_id": guest.id,
        "guest_name": guest.full_name,
        "guest_salutation": guest.salutation,
        "guest_first": guest.first,
        "guest_last": guest.last,
        "is_organizer": invitation.organizer,
        "party": party_info(party, blocks, rows),
    }


def public_party_details(session: Session, party: Party) -> dict:
    """Public party view for visitors without an invitation."""
    blocks = parse_blocks(party.invitation_blocks)
    rows = party_answer_rows(session, party.id)
    info = party_info(party, blocks, rows)
    info["invitation_blocks"] = blocks
    info["other_guests_answers"] = filter_other_answers(blocks, rows, organizer=False)
    return info


def save_answers(session: Session, invitation: Invitation, answers: Any) -> dict:
    """Persist a guest's answers, keeping only keys that are current block ids.

    The capacity check and the write are separate statements, so two guests
    saying "yes" at the same moment can both get the last seat.
    """
    party = session.get(Party, invitation.party_id)
    if party is None:
        raise LookupError("Party not found")

    ensure_open(party)

    blocks = parse_blocks(party.invitation_blocks)
    valid_ids = block_ids(blocks)
    if isinstance(answers, dict):
        filtered = {k: v for k, v in answers.items() if k in valid_ids}
    else:
        filtered = {}

    attendance_id = attendance_block_id(blocks)
    if attendance_id is not None and party.max_guests > 0:
        was_attending = is_attending(parse_answers(invitation.invitation_block_answers), attendance_id)
        if is_attending(filtered, attendance_id) and not was_attending:
            others = [
                r for r in party_answer_rows(session, party.id)
                if r.invitation_id != invitation.id
            ]
            if attending_count(blocks, others) >= party.max_guests:
                raise PartyFullError("Party is full")

    invitation.invitation_block_answers = json.dumps(filtered)
    session.add(invitation)
    session.commit()
    return filtered


def register_public_guest(
    session: Session,
    party: Party,
    salutation: str,
    first: str,
    last: str,
    email: str,
) -> Invitation:
    """Create a self-registered guest owned by the party's author and invite them."""
    ensure_open(party)

    guest = Guest(
        salutation=salutation.strip(),
        first=first.strip(),
        last=last.strip(),
        email=email.strip(),
        author=party.author,
        selfcreated=True,
    )
    session.add(guest)
    session.flush()

    invitation = Invitation(guest_id=guest.id, party_id=party.id)
    session.add(invitation)
    session.commit()
    session.refresh(invitation)

    logger.info("Guest %s registered for public party %s", guest.id, party.id)
    return invitation
