"""Invitation model."""

import uuid

from sqlmodel import Field, SQLModel


class Invitation(SQLModel, table=True):
    __tablename__ = "invitations"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    guest_id: str = Field(foreign_key="guests.id", index=True)
    party_id: str = Field(foreign_key="parties.id", index=True)
    invitation_block_answers: str = Field(default="{}")  # JSON map block id -> answer
    organizer: bool = Field(default=False)
