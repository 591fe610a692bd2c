"""
Feature flag and user assignment models.

Tables:
- feature_flags: flag definitions, keyed by a unique, immutable key
- user_feature_flags: many-to-many link between users and flags
"""

from datetime import datetime
from sqlalchemy import String, Boolean, Text, ForeignKey, DateTime, Index, false, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, SoftDeleteMixin


class FeatureFlag(Base, TimestampMixin, SoftDeleteMixin):
    """Feature flag definition."""

    __tablename__ = "feature_flags"

    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(
        Text,
        default="",
        server_default="",
        nullable=False,
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
    )

    def __repr__(self) -> str:
        status = "ON" if self.enabled else "OFF"
        return f"<FeatureFlag {self.key} [{status}]>"


class UserFeatureFlag(Base):
    """
    Assignment of a feature flag to a user.

    The (user_id, feature_flag_id) primary key rejects duplicate
    assignments, and both foreign keys cascade so a removed endpoint
    takes its assignments with it.
    """

    __tablename__ = "user_feature_flags"
    __table_args__ = (
        Index("idx_user_feature_flags_user_id", "user_id"),
        Index("idx_user_feature_flags_feature_flag_id", "feature_flag_id"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    feature_flag_id: Mapped[int] = mapped_column(
        ForeignKey("feature_flags.id", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserFeatureFlag user={self.user_id} flag={self.feature_flag_id}>"
