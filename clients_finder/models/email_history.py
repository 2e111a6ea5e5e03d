from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey
from sqlalchemy.orm import relationship

from clients_finder.core.database import Base

STATUS_SENT = "SENT"
STATUS_FAILED = "FAILED"

METHOD_SMTP = "SMTP"
METHOD_BREVO = "BREVO"


class EmailHistory(Base):
    __tablename__ = "email_history"

    id = Column(Integer, primary_key=True, index=True)

    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    recipient = Column(Text, nullable=False)
    subject = Column(Text)
    body = Column(Text)

    method = Column(String(10))   # 'SMTP', 'BREVO'
    status = Column(String(10))   # 'SENT', 'FAILED'
    failure_reason = Column(Text, nullable=True)
    message_id = Column(String, nullable=True)

    sent_at = Column(TIMESTAMP, default=datetime.utcnow)

    client = relationship("Client", back_populates="email_history")
