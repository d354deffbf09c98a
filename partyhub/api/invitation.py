"""Invitation API endpoints. Guests authenticate by knowing their invitation id."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from partyhub.database import get_session
from partyhub.models.invitation import Invitation
from partyhub.models.party import Party
from partyhub.schemas.invitation import SaveAnswersRequest, SaveAnswersResponse
from partyhub.services import invitation_service
from partyhub.services.calendar_service import generate_ics
from partyhub.services.notification_service import invitation_url

router = APIRouter(prefix="/invitation", tags=["invitation"])


def _get_invitation(session: Session, invitation_id: str) -> Invitation:
    invitation = session.get(Invitation, invitation_id)
    if not invitation:
        raise HTTPException(status_code=404, detail="Invitation not found")
    return invitation


@router.get("/public/{party_id}")
def public_party(party_id: str, session: Session = Depends(get_session)):
    """Blocks and public answers of a public party, for visitors who are not invited yet."""
    party = session.get(Party, party_id)
    if party is None or not party.public:
        raise HTTPException(status_code=404, detail="Party not found")
    return invitation_service.public_party_details(session, party)


@router.get("/{invitation_id}/calendar.ics")
def invitation_calendar(invitation_id: str, session: Session = Depends(get_session)):
    """Download the party as a calendar event."""
    invitation = _get_invitation(session, invitation_id)
    party = session.get(Party, invitation.party_id)
    if party is None:
        raise HTTPException(status_code=404, detail="Party not found")

    ics_text = generate_ics(party, invitation_url(invitation.id))
    if ics_text is None:
        raise HTTPException(status_code=404, detail="Party has no date yet")

    headers = {"Content-Disposition": 'attachment; filename="party.ics"'}
    return Response(content=ics_text, media_type="text/calendar", headers=headers)


@router.get("/{invitation_id}")
def invitation_details(invitation_id: str, session: Session = Depends(get_session)):
    """Invitation blocks, own answers and the other guests' answers this guest may see."""
    invitation = _get_invitation(session, invitation_id)
    try:
        return invitation_service.invitation_details(session, invitation)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{invitation_id}", response_model=SaveAnswersResponse)
def save_answers(
    invitation_id: str,
    request: SaveAnswersRequest,
    session: Session = Depends(get_session),
):
    """Save answers. Unknown block ids are dropped."""
    invitation = _get_invitation(session, invitation_id)
    try:
        saved = invitation_service.save_answers(session, invitation, request.answers)
    except invitation_service.InvitationClosedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except invitation_service.PartyFullError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SaveAnswersResponse(answers=saved)
