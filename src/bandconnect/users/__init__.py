"""User accounts and the signed-in user."""

from bandconnect.users.directory import UserDirectory, sample_band_members
from bandconnect.users.models import User, UserRole

__all__ = [
    "UserDirectory",
    "sample_band_members",
    "User",
    "UserRole",
]
