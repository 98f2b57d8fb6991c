from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from workforce.database import Base

class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (UniqueConstraint("user_id", "title", name="uq_achievement_user_title"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    awarded_at = Column(DateTime, server_default=func.now())
