import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Text, Float, TIMESTAMP
from sqlalchemy.orm import relationship

from clients_finder.core.database import Base


class ClientStatus(str, enum.Enum):
    PENDING = "PENDING"
    LEAD = "LEAD"
    CONTACTED = "CONTACTED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


def new_id():
    return str(uuid.uuid4())


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=new_id)

    # External (Geoapify) place identifier. Ingestion relies on this being unique.
    place_id = Column(String, unique=True, index=True, nullable=False)

    name = Column(Text, nullable=False)
    category = Column(Text)

    address = Column(Text, nullable=False)
    street = Column(Text)
    city = Column(Text, index=True)
    state = Column(Text)
    postcode = Column(String(20))
    country = Column(Text)
    country_code = Column(String(5))

    phone = Column(Text)
    email = Column(Text)
    website = Column(Text)

    latitude = Column(Float, nullable=False, default=0.0)
    longitude = Column(Float, nullable=False, default=0.0)

    status = Column(String(20), nullable=False, default=ClientStatus.PENDING.value, index=True)

    opening_hours = Column(Text)
    facilities = Column(Text)
    datasource = Column(Text)

    created_at = Column(TIMESTAMP, default=datetime.utcnow, index=True)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow)

    notes = relationship(
        "Note",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="Note.created_at.desc()",
    )
    email_history = relationship(
        "EmailHistory",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="EmailHistory.sent_at.desc()",
    )

    @property
    def has_website(self) -> bool:
        return bool(self.website and self.website.strip())
