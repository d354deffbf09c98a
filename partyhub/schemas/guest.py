"""Guest schemas."""

from pydantic import BaseModel


class GuestResponse(BaseModel):
    id: str
    salutation: str
    first: str
    last: str
    email: str
    note: str
    selfcreated: bool


class GuestRequest(BaseModel):
    salutation: str = ""
    first: str = ""
    last: str = ""
    email: str = ""
    note: str = ""


class GuestCreateResponse(BaseModel):
    status: str = "success"
    message: str = "Guest created successfully"
    guest_id: str


class PublicGuestRequest(BaseModel):
    salutation: str = ""
    first: str
    last: str = ""
    email: str = ""


class PublicGuestResponse(BaseModel):
    status: str = "success"
    guest_id: str
    invitation_id: str
