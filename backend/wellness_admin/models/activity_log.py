from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from ..platform.database import Base


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    admin_email = Column(String, nullable=False, index=True)
    action = Column(String, nullable=False, index=True)  # CREATE, UPDATE, BULK_DELETE, ...
    entity_type = Column(String, nullable=False, index=True)  # ASSESSMENT
    entity_id = Column(String, nullable=True)
    entity_name = Column(String, nullable=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
