import uuid
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB

from portal.db.enums import NotificationType
from .base import Base, now_utc, enum_column


class Notification(Base):
    __tablename__ = 'notifications'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    receiver_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id', ondelete='CASCADE'), nullable=False)
    notification_type = enum_column(NotificationType, nullable=False)
    creator_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=True)
    content = Column(JSONB, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    done = Column(Boolean, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_notifications_receiver_date_created', 'receiver_user_id', 'date_created'),
        Index('idx_notifications_receiver_is_read', 'receiver_user_id', 'is_read'),
    )
