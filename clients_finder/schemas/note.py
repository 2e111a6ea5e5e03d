from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class NoteWrite(BaseModel):
    content: Optional[str] = None


class NoteResponse(BaseModel):
    id: int
    client_id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NoteEnvelope(BaseModel):
    success: bool = True
    note: NoteResponse


class NoteListResponse(BaseModel):
    success: bool = True
    notes: List[NoteResponse]
