"""Guest management and self-registration for public parties."""

from sqlmodel import select

from partyhub.models.guest import Guest
from partyhub.models.invitation import Invitation
from tests.conftest import create_guest, create_party, invite


def test_create_update_and_list(client, auth_headers):
    r = client.post("/guest/new", headers=auth_headers, json={
        "salutation": "Dr.", "first": " Zoe ", "last": "Zed", "email": "zoe@example.com",
    })
    assert r.status_code == 200
    zoe_id = r.json()["guest_id"]
    client.post("/guest/new", headers=auth_headers, json={"first": "Adam", "last": "Ant"})

    guests = client.get("/guest", headers=auth_headers).json()
    assert [g["first"] for g in guests] == ["Adam", "Zoe"]

    r = client.post(f"/guest/{zoe_id}/update", headers=auth_headers, json={
        "first": "Zoe", "last": "Zimmer", "note": "vegan",
    })
    assert r.status_code == 200

    zoe = client.get(f"/guest/{zoe_id}", headers=auth_headers).json()
    assert zoe["last"] == "Zimmer"
    assert zoe["note"] == "vegan"
    assert zoe["email"] == ""
    assert zoe["selfcreated"] is False


def test_foreign_guest_is_hidden(client, session, other_author, auth_headers):
    guest = create_guest(session, other_author)
    assert client.get(f"/guest/{guest.id}", headers=auth_headers).status_code == 404
    assert client.post(f"/guest/{guest.id}/update", headers=auth_headers, json={"first": "x"}).status_code == 404
    assert client.delete(f"/guest/{guest.id}/delete", headers=auth_headers).status_code == 404
    assert client.get("/guest", headers=auth_headers).json() == []


def test_delete_removes_invitations(client, session, author, auth_headers):
    guest = create_guest(session, author)
    invite(session, create_party(session, author), guest)
    guest_id = guest.id

    assert client.delete(f"/guest/{guest_id}/delete", headers=auth_headers).status_code == 200

    session.expire_all()
    assert session.get(Guest, guest_id) is None
    assert session.exec(select(Invitation).where(Invitation.guest_id == guest_id)).all() == []


class TestPublicRegistration:
    def test_registers_selfcreated_guest(self, client, session, author):
        party = create_party(session, author, public=True)
        r = client.post(f"/guest/public_guest/{party.id}", json={"first": " Eve ", "email": "eve@example.com"})
        assert r.status_code == 200
        body = r.json()

        guest = session.get(Guest, body["guest_id"])
        assert guest.first == "Eve"
        assert guest.selfcreated is True
        assert guest.author == author.id

        invitation = session.get(Invitation, body["invitation_id"])
        assert invitation.party_id == party.id
        assert invitation.organizer is False

    def test_non_public_party_is_404(self, client, session, author):
        party = create_party(session, author)
        assert client.post(f"/guest/public_guest/{party.id}", json={"first": "Eve"}).status_code == 404
        assert client.post("/guest/public_guest/missing", json={"first": "Eve"}).status_code == 404

    def test_blank_first_name_is_400(self, client, session, author):
        party = create_party(session, author, public=True)
        assert client.post(f"/guest/public_guest/{party.id}", json={"first": "   "}).status_code == 400

    def test_frozen_party_is_closed(self, client, session, author):
        party = create_party(session, author, public=True, frozen=True)
        assert client.post(f"/guest/public_guest/{party.id}", json={"first": "Eve"}).status_code == 403

    def test_past_deadline_is_closed(self, client, session, author):
        party = create_party(session, author, public=True, respond_until="2000-01-01")
        r = client.post(f"/guest/public_guest/{party.id}", json={"first": "Eve"})
        assert r.status_code == 403
        assert "deadline" in r.json()["detail"]

    def test_register_page(self, client, session, author):
        public = create_party(session, author, public=True)
        private = create_party(session, author)
        assert client.get(f"/register/{public.id}").status_code == 200
        assert client.get(f"/register/{private.id}").status_code == 404
