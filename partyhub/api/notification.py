"""Web push subscription endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from partyhub.database import get_session
from partyhub.models.guest import Guest
from partyhub.models.push import GuestSubscription, WebPushSubscription
from partyhub.schemas.notification import (
    AssociateGuestRequest,
    VapidKeyResponse,
    WebPushSubscriptionRequest,
)
from partyhub.schemas.party import StatusResponse
from partyhub.utils.web_push import get_public_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notification", tags=["notification"])


def _link_guest(session: Session, guest_id: str, subscription_id: str) -> None:
    link = session.get(GuestSubscription, (guest_id, subscription_id))
    if link is None:
        session.add(GuestSubscription(guest_id=guest_id, subscription_id=subscription_id))


def _require_guest(session: Session, guest_id: str) -> None:
    if session.get(Guest, guest_id) is None:
        raise HTTPException(status_code=404, detail="Guest not found")


@router.get("/vapid-public-key", response_model=VapidKeyResponse)
def vapid_public_key():
    key = get_public_key()
    if key is None:
        raise HTTPException(status_code=500, detail="VAPID public key unavailable")
    return VapidKeyResponse(publicKey=key)


@router.post("/web-push-subscribe/{guest_id}", response_model=StatusResponse)
def web_push_subscribe(
    guest_id: str,
    request: WebPushSubscriptionRequest,
    session: Session = Depends(get_session),
):
    """Store a device subscription (keyed by endpoint) and link it to the guest."""
    _require_guest(session, guest_id)

    subscription = session.exec(
        select(WebPushSubscription).where(WebPushSubscription.endpoint == request.endpoint)
    ).first()
    if subscription is None:
        subscription = WebPushSubscription(
            endpoint=request.endpoint,
            p256dh=request.p256dh,
            auth=request.auth,
        )
    else:
        subscription.p256dh = request.p256dh
        subscription.auth = request.auth
    session.add(subscription)
    session.flush()

    _link_guest(session, guest_id, subscription.id)
    session.commit()
    logger.info("Guest %s subscribed to web push", guest_id)
    return StatusResponse(message="Subscribed")


@router.post("/associate-guest/{guest_id}", response_model=StatusResponse)
def associate_guest(
    guest_id: str,
    request: AssociateGuestRequest,
    session: Session = Depends(get_session),
):
    """Link another guest to a device that is already subscribed."""
    _require_guest(session, guest_id)

    subscription = session.exec(
        select(WebPushSubscription).where(WebPushSubscription.endpoint == request.endpoint)
    ).first()
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found for this device")

    _link_guest(session, guest_id, subscription.id)
    session.commit()
    return StatusResponse(message="Guest associated")
