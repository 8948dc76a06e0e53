"""User aggregate root.

One account per canonical email, whichever channel (email OTP or an OAuth
provider) first established it.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from portal.domain.model.common import DomainModel
from portal.domain.value import AuthProvider, Email, UserId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(DomainModel):
    """Canonical user account.

    ``auth_provider`` records the channel that created the account. Further
    OAuth providers hang off the account as ``UserIdentity`` links.
    """

    id: UserId
    email: Email
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    auth_provider: AuthProvider = AuthProvider.EMAIL_OTP
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def with_profile(
        self,
        display_name: Optional[str],
        avatar_url: Optional[str],
        now: datetime,
    ) -> "User":
        """Return a copy with refreshed profile fields.

        Missing values from the provider do not erase what is stored.
        """
        return self.model_copy(
            update={
                "display_name": display_name or self.display_name,
                "avatar_url": avatar_url or self.avatar_url,
                "updated_at": now,
            }
        )
