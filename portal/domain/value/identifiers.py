"""Strongly typed identifiers for Portal domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
UserIdentityId = NewType("UserIdentityId", UUID)
OtpId = NewType("OtpId", UUID)
