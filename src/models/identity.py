# src/models/identity.py

"""Session identity and the single privilege flag derived from it."""

from dataclasses import dataclass, field
from typing import Literal

from src.config.settings import Settings

UserRole = Literal["guest", "user", "admin"]


@dataclass(frozen=True)
class Profile:
    """Display profile supplied by the identity provider."""

    display_name: str
    avatar_url: str = ""
    saved_address: str = ""
    saved_city: str = ""
    saved_postal: str = ""


@dataclass(frozen=True)
class Identity:
    """Who is using the store.

    ``is_admin`` is the only capability the core checks; it gates catalog
    mutation and pending-review visibility.
    """

    user_id: str = ""
    email: str = ""
    profile: Profile = field(
        default_factory=lambda: Profile(display_name="Guest")
    )
    is_admin: bool = False

    @property
    def is_signed_in(self) -> bool:
        return bool(self.user_id)

    @property
    def role(self) -> UserRole:
        if self.is_admin:
            return "admin"
        return "user" if self.is_signed_in else "guest"

    @property
    def display_name(self) -> str:
        return self.profile.display_name


def guest() -> Identity:
    """An anonymous session: can browse, fill a cart and check out."""
    return Identity()


def signed_in(
    user_id: str,
    email: str,
    display_name: str = "",
    admin_user: str | None = None,
) -> Identity:
    """Resolve a signed-in user, granting admin by configured email.

    The display name defaults to the local part of the email.
    """
    configured = Settings.ADMIN_USER if admin_user is None else admin_user
    name = display_name or email.split("@")[0] or "Patron"
    return Identity(
        user_id=user_id,
        email=email,
        profile=Profile(display_name=name),
        is_admin=bool(configured) and email == configured,
    )


def local_admin() -> Identity:
    """The local administrator session that needs no identity provider."""
    return Identity(
        user_id=Settings.LOCAL_ADMIN_ID,
        email=Settings.ADMIN_USER,
        profile=Profile(display_name="Administrator"),
        is_admin=True,
    )
