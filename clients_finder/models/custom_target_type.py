from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP

from clients_finder.core.database import Base

DEFAULT_COLOR = "#3B82F6"


class CustomTargetType(Base):
    __tablename__ = "custom_target_types"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(20), default=DEFAULT_COLOR)

    created_at = Column(TIMESTAMP, default=datetime.utcnow)

    @property
    def target_key(self) -> str:
        return f"CUSTOM_{self.id}"
