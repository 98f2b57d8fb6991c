from sqlalchemy import Column, Integer, Float, DateTime, func
from workforce.database import Base

class CompanySettings(Base):
    """Singleton row holding the office location used for geofencing."""

    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, index=True)
    office_lat = Column(Float, nullable=False)
    office_lng = Column(Float, nullable=False)
    geofence_radius = Column(Float, nullable=False, default=0)  # meters, 0 disables
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
