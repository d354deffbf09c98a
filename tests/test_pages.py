"""HTML pages and the scripts that drive them."""

import pytest

from tests.conftest import RSVP_BLOCKS, create_guest, create_party, invite


def _login(client, author):
    client.post("/auth", data={"author-secret": author.author_secret}, follow_redirects=False)


@pytest.mark.parametrize("accept_language", ["en-US", "de-DE"])
def test_dashboard_has_party_and_guest_editors(client, author, accept_language):
    _login(client, author)
    html = client.get("/dashboard", headers={"Accept-Language": accept_language}).text
    for element_id in (
        "party-form", "party-blocks", "party-changelog", "party-frozen", "party-public",
        "party-max-guests", "delete-party", "invited-guests", "invite-select",
        "guest-form", "guest-list",
    ):
        assert f'id="{element_id}"' in html


def test_dashboard_script_uses_management_endpoints(client):
    script = client.get("/static/manage.js").text
    for fragment in (
        "/update", "/delete", "/add/", "/remove/", "promote", "demote",
        "changelog", "/guest/new", "/guest/${guestId}/update",
    ):
        assert fragment in script


def test_register_page_shows_party_details(client, session, author):
    party = create_party(session, author, public=True)
    html = client.get(f"/register/{party.id}").text
    assert 'id="party-details"' in html
    assert "/invitation/public/" in client.get("/static/register.js").text


def test_public_details_cover_registration_page(client, session, author):
    party = create_party(
        session, author, RSVP_BLOCKS, name="Picnic", public=True, max_guests=5,
        location="Park", respond_until="2000-01-01",
    )
    invite(session, party, create_guest(session, author, "Ann", "A"), {"a1": 0})

    body = client.get(f"/invitation/public/{party.id}").json()
    assert body["name"] == "Picnic"
    assert body["location"] == "Park"
    assert body["has_rsvp_block"] is True
    assert body["attending_count"] == 1
    assert body["max_guests"] == 5
    assert body["deadline_passed"] is True
    assert body["frozen"] is False


def test_service_worker_scope_header(client):
    r = client.get("/web-push-service-worker.js")
    assert r.status_code == 200
    assert r.headers["service-worker-allowed"] == "/"
