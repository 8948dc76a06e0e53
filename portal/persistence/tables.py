"""SQLAlchemy Core table definitions.

Domain models are immutable pydantic objects, so repositories map rows by
hand (see ``mappers``) instead of using the ORM.
"""

from sqlalchemy import (
    TIMESTAMP,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("email", String(320), nullable=False),  # Normalized, lowercase
    Column("display_name", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column("auth_provider", String(50), nullable=False),  # Establishing channel
    Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
    UniqueConstraint("email", name="uq_users_email"),
)

user_identities_table = Table(
    "user_identities",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("provider", String(50), nullable=False),  # 'github', 'gitlab', 'google'
    Column("provider_user_id", String(255), nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint(
        "provider", "provider_user_id", name="uq_user_identities_provider_subject"
    ),
    UniqueConstraint("user_id", "provider", name="uq_user_identities_user_provider"),
    Index("idx_user_identities_user_id", "user_id"),
)

pending_otps_table = Table(
    "pending_otps",
    metadata,
    Column("email", String(320), primary_key=True),
    Column("id", UUID(as_uuid=True), nullable=False),  # Regenerated per issue
    Column("code_hash", String(64), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("attempts_remaining", Integer, nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Index("idx_pending_otps_expires_at", "expires_at"),
)
