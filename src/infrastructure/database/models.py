"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Skill-exchange profile, one row per auth user."""

    __tablename__ = "profiles"

    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255))
    skills_offered: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    skills_wanted: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    availability: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    profile_picture: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class SwapRequestModel(Base):
    """Directed swap request between two users."""

    __tablename__ = "swap_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_swap_requests_status",
        ),
        CheckConstraint(
            "from_user_id <> to_user_id",
            name="ck_swap_requests_not_self",
        ),
        Index("ix_swap_requests_from_user_created", "from_user_id", "created_at"),
        Index("ix_swap_requests_to_user_created", "to_user_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    from_user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    from_user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    to_user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    to_user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
