from sqlalchemy import Column, Integer, String, Float, DateTime, func
from workforce.database import Base
from workforce.core.enums import Role

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.STAFF.value)  # STAFF, ADMIN, EXECUTIVE
    phone = Column(String, nullable=True)

    # Written as a side effect of QR check-in/out, read by the live map
    last_lat = Column(Float, nullable=True)
    last_lng = Column(Float, nullable=True)
    last_location_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
