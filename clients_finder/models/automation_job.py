from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, JSON
from clients_finder.core.database import Base


class AutomationJob(Base):
    __tablename__ = "automation_jobs"

    id = Column(Integer, primary_key=True, index=True)

    job_type = Column(String)   # 'places_auto_fetch'
    status = Column(String)     # 'running', 'completed', 'failed'

    started_at = Column(TIMESTAMP)
    finished_at = Column(TIMESTAMP)

    result_summary = Column(JSON, nullable=True)
    error_message = Column(Text)

    created_at = Column(TIMESTAMP)
