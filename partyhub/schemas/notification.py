"""Web push subscription schemas."""

from pydantic import BaseModel


class WebPushSubscriptionRequest(BaseModel):
    endpoint: str
    p256dh: str
    auth: str


class AssociateGuestRequest(BaseModel):
    endpoint: str


class VapidKeyResponse(BaseModel):
    publicKey: str
