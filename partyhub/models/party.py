"""Party model."""

import uuid

from sqlmodel import Field, SQLModel


class Party(SQLModel, table=True):
    __tablename__ = "parties"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(default="New Party")
    author: str = Field(foreign_key="authors.id", index=True)
    invitation_blocks: str = Field(default="[]")  # JSON array of blocks
    date: str = Field(default="")  # ISO 8601
    duration: float = Field(default=1.0)  # hours
    location: str = Field(default="")
    respond_until: str = Field(default="")  # ISO 8601
    frozen: bool = Field(default=False)
    public: bool = Field(default=False)
    max_guests: int = Field(default=0)  # 0 = unlimited
    has_rsvp_block: bool = Field(default=False)
