"""Web push subscription models."""

import uuid

from sqlmodel import Field, SQLModel


class WebPushSubscription(SQLModel, table=True):
    __tablename__ = "web_push_subscriptions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    endpoint: str = Field(unique=True)
    p256dh: str
    auth: str


class GuestSubscription(SQLModel, table=True):
    """A device subscription can receive notifications for several guests."""
    __tablename__ = "guest_subscriptions"

    guest_id: str = Field(foreign_key="guests.id", primary_key=True)
    subscription_id: str = Field(foreign_key="web_push_subscriptions.id", primary_key=True)
