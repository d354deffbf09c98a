"""HTML pages and root-level static assets."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse
from sqlmodel import Session

from partyhub.api.deps import get_optional_author
from partyhub.config import settings
from partyhub.database import get_session
from partyhub.models.author import Author
from partyhub.models.invitation import Invitation
from partyhub.models.party import Party
from partyhub.utils.i18n import detect_language

PAGES_DIR = settings.web_dir / "pages"
STATIC_DIR = settings.web_dir / "static"

router = APIRouter(tags=["pages"])


def render_page(name: str, request: Request):
    """Serve ``pages/<lang>/<name>.html`` for the visitor's language."""
    path = PAGES_DIR / detect_language(request) / f"{name}.html"
    if not path.is_file():
        return HTMLResponse("<h1>404: File Not Found</h1>", status_code=404)
    return FileResponse(str(path), media_type="text/html")


def _static_file(name: str, media_type: Optional[str] = None, headers: Optional[dict] = None):
    path = STATIC_DIR / name
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"{name} not found")
    return FileResponse(str(path), media_type=media_type, headers=headers)


@router.get("/favicon.ico", include_in_schema=False)
def favicon():
    return _static_file("favicon.ico")


@router.get("/manifest.json", include_in_schema=False)
def manifest():
    return _static_file("manifest.json", media_type="application/json")


@router.get("/web-push-service-worker.js", include_in_schema=False)
def service_worker():
    """The worker must be served from the root to control the whole site."""
    return _static_file(
        "web-push-service-worker.js",
        media_type="application/javascript",
        headers={"Service-Worker-Allowed": "/"},
    )


@router.get("/")
def home(request: Request):
    return render_page("index", request)


@router.get("/dashboard")
def dashboard(request: Request, author: Optional[Author] = Depends(get_optional_author)):
    """Party management UI. Requires a session."""
    if author is None:
        return RedirectResponse("/auth", status_code=302)
    return render_page("manage", request)


@router.get("/register/{party_id}")
def register_page(party_id: str, request: Request, session: Session = Depends(get_session)):
    """Self-registration page of a public party."""
    party = session.get(Party, party_id)
    if party is None or not party.public:
        raise HTTPException(status_code=404, detail="Party not found")
    return render_page("register", request)


def invitation_page(invitation_id: str, request: Request, session: Session = Depends(get_session)):
    """Personal invitation page. Registered last since it matches any single segment."""
    if session.get(Invitation, invitation_id) is None:
        raise HTTPException(status_code=404, detail="Invitation not found")
    return render_page("invitation", request)
