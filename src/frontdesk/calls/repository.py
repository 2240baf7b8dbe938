"""
Repository for call record persistence.
"""

from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Text, func, select
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.calls.models import CallOutcome, CallRecord
from frontdesk.shared.database import Base, DatabaseManager
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class CallRecordRow(Base):
    """ORM row for one dialed call."""

    __tablename__ = "call_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prospect_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    outcome: Mapped[str] = mapped_column(String(32), nullable=False)
    duration_seconds: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False)
    called_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> CallRecord:
        return CallRecord(
            prospect_id=self.prospect_id,
            outcome=CallOutcome(self.outcome),
            duration_seconds=self.duration_seconds,
            notes=self.notes,
            timestamp=self.called_at,
            attempt_number=self.attempt_number,
        )


class CallRecordRepository:
    """Stores call records through an async SQLAlchemy session per write."""

    def __init__(self, db_manager: DatabaseManager) -> None:
        """Initialize repository with a database manager.

        Args:
            db_manager: Source of async sessions.
        """
        self._db = db_manager

    async def append_call_record(self, record: CallRecord) -> None:
        """Insert one call record.

        Args:
            record: The record produced by the call queue.
        """
        row = CallRecordRow(
            prospect_id=record.prospect_id,
            outcome=record.outcome.value,
            duration_seconds=record.duration_seconds,
            notes=record.notes,
            attempt_number=record.attempt_number,
            called_at=record.timestamp,
        )
        async with self._db.session() as session:
            session.add(row)
        logger.debug(
            "Call record persisted",
            extra={"prospect_id": record.prospect_id, "attempt_number": record.attempt_number},
        )

    async def list_for_prospect(self, prospect_id: str, limit: int = 10) -> Sequence[CallRecord]:
        """Get the most recent records for a prospect, newest first."""
        stmt = (
            select(CallRecordRow)
            .where(CallRecordRow.prospect_id == str(prospect_id))
            .order_by(CallRecordRow.called_at.desc(), CallRecordRow.id.desc())
            .limit(limit)
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            return [row.to_record() for row in result.scalars().all()]

    async def count(self) -> int:
        async with self._db.session() as session:
            result = await session.execute(select(func.count()).select_from(CallRecordRow))
            return int(result.scalar_one())
