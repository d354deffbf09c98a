"""Which of the other guests' answers an invitation viewer may see.

Three rules apply:

1. Non-organizers only see blocks whose content is flagged ``public``.
2. Organizers see every block of every other guest. When the party has an
   attendance block, guests who have not answered it with "yes" get a
   ``" (?)"`` suffix on their name.
3. Non-organizers only see a guest's public answers once that guest has
   RSVP'd "yes". The attendance answer itself is exempt, so "who's coming"
   shows even before anyone has committed.

Everything here works on already-fetched rows and never touches the database.
"""

from dataclasses import dataclass
from typing import Any, Optional

from partyhub.services.blocks import (
    attendance_block,
    is_attending,
    parse_answers,
    public_block_ids,
    public_flag,
)

UNCONFIRMED_SUFFIX = " (?)"


@dataclass
class OtherAnswers:
    """One other guest's stored answers for the same party."""
    invitation_id: str
    answers: Any  # JSON text or an already-decoded dict
    guest_name: str


def _entry(answer: Any, guest_name: str) -> dict:
    return {"answer": answer, "guest_name": guest_name}


def filter_other_answers(
    blocks: list[dict],
    others: list[OtherAnswers],
    *,
    organizer: bool,
    viewer_invitation_id: Optional[str] = None,
) -> list[dict]:
    """Return one ``{block_id: {"answer", "guest_name"}}`` map per visible guest."""
    public_ids = public_block_ids(blocks)
    rsvp_block = attendance_block(blocks)
    attendance_id = rsvp_block["id"] if rsvp_block else None

    # The attendance answer is shown whenever any answer is public at all,
    # unless the block itself is explicitly hidden.
    show_attendance = (
        attendance_id is not None
        and public_flag(rsvp_block) is not False
        and bool(public_ids)
    )

    results = []
    for other in others:
        if viewer_invitation_id is not None and other.invitation_id == viewer_invitation_id:
            continue

        answers = parse_answers(other.answers)
        attending = is_attending(answers, attendance_id)

        if organizer:
            name = other.guest_name
            if attendance_id is not None and not attending:
                name += UNCONFIRMED_SUFFIX
            results.append({block_id: _entry(value, name) for block_id, value in answers.items()})
            continue

        visible = {}
        for block_id, value in answers.items():
            if block_id == attendance_id:
                if show_attendance:
                    visible[block_id] = _entry(value, other.guest_name)
            elif block_id in public_ids and (attendance_id is None or attending):
                visible[block_id] = _entry(value, other.guest_name)

        if visible:
            results.append(visible)

    return results


def count_attending(blocks: list[dict], answer_maps: list[Any]) -> int:
    """Number of invitations with a "yes" on the party's attendance block."""
    rsvp_block = attendance_block(blocks)
    if rsvp_block is None:
        return 0
    return sum(1 for raw in answer_maps if is_attending(parse_answers(raw), rsvp_block["id"]))
