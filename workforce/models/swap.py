from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from workforce.database import Base
from workforce.core.enums import ACTIVE_SWAP_STATUSES, SwapStatus

class ShiftSwapRequest(Base):
    __tablename__ = "shift_swap_requests"

    id = Column(Integer, primary_key=True, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id"), nullable=False, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    claimant_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # set on claim
    status = Column(String, nullable=False, default=SwapStatus.OPEN.value)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    shift = relationship("Shift", lazy="joined")


# At most one OPEN or PENDING_APPROVAL request per shift
_active = ShiftSwapRequest.status.in_([s.value for s in ACTIVE_SWAP_STATUSES])
Index(
    "uq_swap_active_shift",
    ShiftSwapRequest.shift_id,
    unique=True,
    postgresql_where=_active,
    sqlite_where=_active,
)
