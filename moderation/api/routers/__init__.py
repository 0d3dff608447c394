"""API routers for the moderation service."""

from . import edit_proposals
from . import health
from . import moderation

__all__ = [
    "edit_proposals",
    "health",
    "moderation",
]
