from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class ClientResponse(BaseModel):
    id: str
    place_id: str
    name: str
    category: Optional[str] = None

    address: str
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None

    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    has_website: bool = False

    latitude: float
    longitude: float
    status: str

    opening_hours: Optional[str] = None
    facilities: Optional[str] = None
    datasource: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientListResponse(BaseModel):
    success: bool = True
    total: int
    clients: List[ClientResponse]


class ClientDetailResponse(BaseModel):
    success: bool = True
    client: ClientResponse


# Schema for PATCH /api/clients/{id}
class StatusUpdate(BaseModel):
    status: Optional[str] = None


class NavigationResponse(BaseModel):
    clientId: Optional[str] = None


class GeocodeRequest(BaseModel):
    address: Optional[str] = None


class GeocodeResponse(BaseModel):
    lat: float
    lon: float
    formatted: str
