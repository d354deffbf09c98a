"""Shared fixtures: a throwaway SQLite database, an app client and seeded rows."""

import json
import os
import tempfile
import uuid

# Setup environment for testing, before any partyhub import reads settings
_data_dir = tempfile.mkdtemp(prefix="partyhub_test_")
os.environ["DATA_DIR"] = _data_dir
os.environ["DB_PATH"] = os.path.join(_data_dir, "test.db")
os.environ["ENV"] = "dev"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["VAPID_PRIVATE_KEY_PATH"] = os.path.join(_data_dir, "missing_private.pem")
os.environ["VAPID_PUBLIC_KEY_PATH"] = os.path.join(_data_dir, "missing_public.pem")
for _name in ("MAIL_SENDTYPE", "SMTP_SERVER", "SMTP_USERNAME", "SMTP_PASSWORD", "SMTP_FROM"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from partyhub.database import engine, init_db
from partyhub.models.author import Author
from partyhub.models.guest import Guest
from partyhub.models.invitation import Invitation
from partyhub.models.party import Party

init_db()


@pytest.fixture
def client():
    from partyhub.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


def create_author(session: Session, name: str = "Alice") -> Author:
    author = Author(name=name, author_secret=f"secret-{uuid.uuid4()}")
    session.add(author)
    session.commit()
    session.refresh(author)
    return author


@pytest.fixture
def author(session):
    return create_author(session)


@pytest.fixture
def other_author(session):
    return create_author(session, "Mallory")


@pytest.fixture
def auth_headers(author):
    return {"Authorization": f"Bearer {author.author_secret}"}


def create_party(session: Session, author: Author, blocks=None, **fields) -> Party:
    blocks = blocks or []
    party = Party(
        author=author.id,
        invitation_blocks=json.dumps(blocks),
        has_rsvp_block=any(b.get("template") == "attendance" for b in blocks),
        **fields,
    )
    session.add(party)
    session.commit()
    session.refresh(party)
    return party


def create_guest(session: Session, author: Author, first: str = "Bob", last: str = "Builder", **fields) -> Guest:
    guest = Guest(author=author.id, first=first, last=last, **fields)
    session.add(guest)
    session.commit()
    session.refresh(guest)
    return guest


def invite(session: Session, party: Party, guest: Guest, answers=None, organizer: bool = False) -> Invitation:
    invitation = Invitation(
        guest_id=guest.id,
        party_id=party.id,
        invitation_block_answers=json.dumps(answers or {}),
        organizer=organizer,
    )
    session.add(invitation)
    session.commit()
    session.refresh(invitation)
    return invitation


RSVP_BLOCKS = [
    {"id": "a1", "template": "attendance", "content": ""},
    {"id": "b1", "template": "text_input", "content": json.dumps({"label": "Bringing?", "public": True})},
    {"id": "c1", "template": "text_input", "content": json.dumps({"label": "Allergies?"})},
]
