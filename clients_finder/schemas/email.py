from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class SendEmailRequest(BaseModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None

    client_id: Optional[str] = Field(None, alias="clientId")
    client_name: Optional[str] = Field(None, alias="clientName")
    client_email: Optional[str] = Field(None, alias="clientEmail")  # used as reply-to

    template_id: Optional[int] = Field(None, alias="templateId")
    use_brevo: bool = Field(False, alias="useBrevo")
    update_status: bool = Field(True, alias="updateStatus")

    class Config:
        # Frontend sends camelCase, scripts send snake_case
        populate_by_name = True


class SendEmailResponse(BaseModel):
    success: bool
    method: str
    message: Optional[str] = None
    message_id: Optional[str] = None
    error: Optional[str] = None
    history_id: Optional[int] = None


class EmailHistoryResponse(BaseModel):
    id: int
    client_id: str
    recipient: str
    subject: Optional[str] = None
    body: Optional[str] = None
    method: Optional[str] = None
    status: Optional[str] = None
    failure_reason: Optional[str] = None
    message_id: Optional[str] = None
    sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmailHistoryListResponse(BaseModel):
    success: bool = True
    emailHistory: List[EmailHistoryResponse]
