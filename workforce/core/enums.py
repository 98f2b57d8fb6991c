from enum import Enum


class Role(str, Enum):
    STAFF = "STAFF"
    ADMIN = "ADMIN"
    EXECUTIVE = "EXECUTIVE"


class AttendanceType(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class AttendanceState(str, Enum):
    """In/out state derived from the latest attendance record."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"

    @property
    def next_event(self) -> AttendanceType:
        if self is AttendanceState.CHECKED_IN:
            return AttendanceType.CHECK_OUT
        return AttendanceType.CHECK_IN


class SwapStatus(str, Enum):
    OPEN = "OPEN"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


ACTIVE_SWAP_STATUSES = (SwapStatus.OPEN, SwapStatus.PENDING_APPROVAL)


class GamificationEvent(str, Enum):
    ATTENDANCE_CHECKIN = "ATTENDANCE_CHECKIN"
