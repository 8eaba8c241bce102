from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Index, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from slot_booking.platform.database.orm_db_setting import Base


class SlotModel(Base):
    __tablename__ = 'slots'
    __table_args__ = (
        CheckConstraint('start_at < end_at', name='ck_slots_start_before_end'),
        CheckConstraint(
            "(status = 'held') = (held_until IS NOT NULL)", name='ck_slots_held_until_iff_held'
        ),
        Index('ix_slots_status_held_until', 'status', 'held_until'),
        Index('ix_slots_mentor_start', 'mentor_id', 'start_at'),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    mentor_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(10), default='free', nullable=False)
    held_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
