"""Party request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel


class PartySummary(BaseModel):
    id: str
    name: str
    date: str
    duration: float
    location: str
    respond_until: str
    frozen: bool
    public: bool
    max_guests: int
    has_rsvp_block: bool


class PartyGuest(BaseModel):
    id: str
    salutation: str
    first: str
    last: str
    name: str
    organizer: bool
    invitation_id: str
    selfcreated: bool
    attendance: Optional[Any] = None


class PartyDetailResponse(PartySummary):
    invitation_blocks: list[dict]
    guests: list[PartyGuest]


class PartyCreateResponse(BaseModel):
    status: str = "success"
    message: str = "Party created successfully"
    party_id: str


class PartyUpdateRequest(BaseModel):
    name: str
    invitation_blocks: Optional[str] = None  # JSON array, as edited in the dashboard
    date: Optional[str] = None
    duration: Optional[float] = None
    location: Optional[str] = None
    respond_until: Optional[str] = None
    frozen: Optional[bool] = None
    public: Optional[bool] = None
    max_guests: Optional[int] = None
    changelog: Optional[str] = None


class StatusResponse(BaseModel):
    status: str = "success"
    message: str
