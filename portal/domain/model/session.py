"""Issued user session."""

from datetime import datetime

from portal.domain.model.common import DomainModel
from portal.domain.value import UserId


class Session(DomainModel):
    """Signed, self-verifying session bound to a user."""

    token: str
    user_id: UserId
    issued_at: datetime
    expires_at: datetime
