from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, JSON

from clients_finder.core.database import Base

# Built-in audiences. Custom ones are stored as "CUSTOM_<custom_target_types.id>".
TARGET_ALL = "ALL"
TARGET_HAS_WEBSITE = "HAS_WEBSITE"
TARGET_NO_WEBSITE = "NO_WEBSITE"
BUILTIN_TARGET_TYPES = (TARGET_ALL, TARGET_HAS_WEBSITE, TARGET_NO_WEBSITE)
CUSTOM_TARGET_PREFIX = "CUSTOM_"


class EmailTemplate(Base):
    __tablename__ = "email_templates"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)  # Internal name (e.g. "No Website Pitch V1")
    subject = Column(Text, nullable=False)

    # HTML body with {{CLIENT_*}} placeholders
    body = Column(Text, nullable=False)

    target_type = Column(String, nullable=False, default=TARGET_ALL, index=True)

    # Public URLs of uploaded files
    attachments = Column(JSON, default=list)

    created_at = Column(TIMESTAMP, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)
