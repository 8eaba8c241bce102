from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from slot_booking.platform.database.orm_db_setting import Base


class SessionModel(Base):
    __tablename__ = 'sessions'
    __table_args__ = (
        # At most one live session per slot
        Index(
            'uq_sessions_slot_live',
            'slot_id',
            unique=True,
            postgresql_where=text("status <> 'canceled'"),
        ),
        Index('ix_sessions_mentor_status_created', 'mentor_id', 'status', 'created_at'),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    mentor_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    mentee_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    slot_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    service_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='requested', nullable=False)
    cancel_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    canceled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
