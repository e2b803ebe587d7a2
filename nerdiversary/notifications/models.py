"""
Subscriber store: push subscriptions, the family members they follow and the
delivery log.
"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from nerdiversary.db.base import Base
from nerdiversary.utils.timezone import utc_now


class Subscription(Base):
    """One browser push subscription, keyed by a hash of its endpoint"""
    __tablename__ = "subscriptions"

    id = Column(String(64), primary_key=True)  # sha256 hex of endpoint
    endpoint = Column(Text, nullable=False, unique=True)
    p256dh = Column(String, nullable=False)
    auth = Column(String, nullable=False)
    enabled_lead_minutes = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    family_members = relationship(
        "FamilyMember",
        back_populates="subscription",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class FamilyMember(Base):
    __tablename__ = "family_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(String(64), ForeignKey("subscriptions.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    birth_datetime = Column(String(16), nullable=False)  # "YYYY-MM-DDTHH:MM", UTC
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    subscription = relationship("Subscription", back_populates="family_members")

    __table_args__ = (
        Index("idx_family_members_birth_datetime", "birth_datetime"),
        Index("idx_family_members_subscription", "subscription_id"),
    )


class NotificationLog(Base):
    __tablename__ = "notification_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(String(64), nullable=False, index=True)
    person_name = Column(String, nullable=True)
    event_id = Column(String, nullable=True)
    lead_minutes = Column(Integer, nullable=True)
    title = Column(String, nullable=True)
    body = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
