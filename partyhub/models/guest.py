"""Guest model."""

import uuid

from sqlmodel import Field, SQLModel


class Guest(SQLModel, table=True):
    __tablename__ = "guests"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    salutation: str = Field(default="")
    first: str = Field(default="")
    last: str = Field(default="")
    email: str = Field(default="")
    note: str = Field(default="")
    author: str = Field(foreign_key="authors.id", index=True)
    selfcreated: bool = Field(default=False)  # registered through a public party

    @property
    def full_name(self) -> str:
        return f"{self.first} {self.last}".strip()
