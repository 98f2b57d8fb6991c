from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from workforce.database import Base

class AttendanceRecord(Base):
    """Append-only check-in/check-out event."""

    __tablename__ = "attendance_records"
    __table_args__ = (
        # A second writer racing on the same identity collides here
        UniqueConstraint("user_id", "sequence", name="uq_attendance_user_sequence"),
        Index("ix_attendance_user_timestamp", "user_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    sequence = Column(Integer, nullable=False)  # 1-based, per user
    type = Column(String, nullable=False)       # CHECK_IN or CHECK_OUT
    method = Column(String, nullable=False, default="QR")
    timestamp = Column(DateTime, nullable=False)
    is_late = Column(Boolean, nullable=False, default=False)
