"""Push and email fan-out to invited guests.

Delivery is best effort: failures are logged and never surface to the
request that triggered the notification.
"""

import logging
import smtplib
from typing import Callable

from sqlmodel import Session, col, select

from partyhub.config import settings
from partyhub.models.guest import Guest
from partyhub.models.push import GuestSubscription, WebPushSubscription
from partyhub.utils import mail, web_push

logger = logging.getLogger(__name__)


def invitation_url(invitation_id: str) -> str:
    return f"{settings.base_url.rstrip('/')}/{invitation_id}"


def push_to_guests(session: Session, message: str, guest_invitations: dict[str, str]) -> int:
    """Push ``message`` to every device linked to each guest. Returns sends that succeeded."""
    if not guest_invitations or not web_push.private_key_available():
        return 0

    rows = session.exec(
        select(GuestSubscription.guest_id, WebPushSubscription)
        .join(WebPushSubscription, GuestSubscription.subscription_id == WebPushSubscription.id)
        .where(col(GuestSubscription.guest_id).in_(list(guest_invitations)))
    ).all()

    sent = 0
    for guest_id, sub in rows:
        invitation_id = guest_invitations.get(guest_id)
        if invitation_id is None:
            continue
        if web_push.send_push(sub.endpoint, sub.p256dh, sub.auth, message, f"/{invitation_id}"):
            sent += 1
    return sent


def email_guests(
    session: Session,
    subject: str,
    body_for: Callable[[str], str],
    guest_invitations: dict[str, str],
) -> int:
    """Email each guest that has an address, with a body built from their invitation id."""
    if not guest_invitations or settings.mail_method is None:
        return 0

    guests = session.exec(
        select(Guest).where(col(Guest.id).in_(list(guest_invitations)), Guest.email != "")
    ).all()

    sent = 0
    for guest in guests:
        body = body_for(guest_invitations[guest.id])
        try:
            if mail.send_email(guest.full_name, guest.email, subject, body):
                sent += 1
        except (mail.MailError, smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", guest.email, e)
    return sent


def notify_guests(
    session: Session,
    guest_invitations: dict[str, str],
    push_text: str,
    subject: str,
    body_for: Callable[[str], str],
) -> None:
    """Push and email every guest in ``guest_invitations`` (guest id -> invitation id)."""
    pushed = push_to_guests(session, push_text, guest_invitations)
    emailed = email_guests(session, subject, body_for, guest_invitations)
    logger.info(
        "Notified %d guest(s): %d push, %d email",
        len(guest_invitations), pushed, emailed,
    )


def notify_invited(session: Session, party_name: str, guest_id: str, invitation_id: str) -> None:
    notify_guests(
        session,
        {guest_id: invitation_id},
        push_text=f"You've been invited to {party_name}!",
        subject=f"You've been invited to {party_name}",
        body_for=lambda inv_id: (
            f"You've been invited to {party_name}!\n\n"
            f"View your invitation at: {invitation_url(inv_id)}"
        ),
    )


def notify_party_update(
    session: Session, party_name: str, changelog: str, guest_invitations: dict[str, str]
) -> None:
    notify_guests(
        session,
        guest_invitations,
        push_text=f"Update regarding {party_name}: {changelog}",
        subject=f"Party Update: {party_name}",
        body_for=lambda inv_id: (
            f"{changelog}\n\nView your invitation at: {invitation_url(inv_id)}"
        ),
    )
