"""User identity entity.

Links an external OAuth provider account to a Portal user.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from portal.domain.model.common import DomainModel
from portal.domain.value import AuthProvider, UserId, UserIdentityId


class UserIdentity(DomainModel):
    """External OAuth identity linked to a user account.

    A ``(provider, provider_user_id)`` pair belongs to at most one user, and
    a user holds at most one link per provider.
    """

    id: UserIdentityId
    user_id: UserId
    provider: AuthProvider
    provider_user_id: str  # Permanent subject id from the provider
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_login_at: Optional[datetime] = None
