from workforce.models.user import User
from workforce.models.attendance import AttendanceRecord
from workforce.models.shift import Shift
from workforce.models.swap import ShiftSwapRequest
from workforce.models.settings import CompanySettings
from workforce.models.achievement import Achievement

__all__ = [
    "User",
    "AttendanceRecord",
    "Shift",
    "ShiftSwapRequest",
    "CompanySettings",
    "Achievement",
]
