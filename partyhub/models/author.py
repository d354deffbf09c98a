"""Author model."""

import uuid

from sqlmodel import Field, SQLModel


class Author(SQLModel, table=True):
    __tablename__ = "authors"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    author_secret: str = Field(index=True)
