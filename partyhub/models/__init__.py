"""Party Hub Database Models."""

from partyhub.models.author import Author
from partyhub.models.party import Party
from partyhub.models.guest import Guest
from partyhub.models.invitation import Invitation
from partyhub.models.push import GuestSubscription, WebPushSubscription

__all__ = [
    "Author",
    "Party",
    "Guest",
    "Invitation",
    "WebPushSubscription",
    "GuestSubscription",
]
