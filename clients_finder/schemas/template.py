from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


# Schema for CREATING a template
# Fields are optional here so the service can report every missing one at once.
class TemplateCreate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None  # The HTML content
    target_type: Optional[str] = None
    attachments: List[str] = []


# Schema for UPDATING (all fields optional)
class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    target_type: Optional[str] = None
    attachments: Optional[List[str]] = None


# Schema for READING (Response to Frontend)
class TemplateResponse(BaseModel):
    id: int
    name: str
    subject: str
    body: str
    target_type: str
    attachments: Optional[List[str]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TemplateEnvelope(BaseModel):
    success: bool = True
    template: TemplateResponse


class TemplateListResponse(BaseModel):
    success: bool = True
    templates: List[TemplateResponse]


class TemplatePreview(BaseModel):
    success: bool = True
    template_id: int
    client_id: str
    subject: str
    body: str
    attachments: List[str] = []


# --- CUSTOM TARGET TYPES ---
class TargetTypeCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class TargetTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    color: str
    target_key: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TargetTypeEnvelope(BaseModel):
    success: bool = True
    customTargetType: TargetTypeResponse


class TargetTypeListResponse(BaseModel):
    success: bool = True
    customTargets: List[TargetTypeResponse]
