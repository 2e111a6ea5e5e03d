from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clients_finder.core.database import get_db
from clients_finder.schemas.email import SendEmailRequest, SendEmailResponse
from clients_finder.services.outreach_service import OutreachService

router = APIRouter(prefix="/api", tags=["Outreach"])


@router.post("/send-email", response_model=SendEmailResponse, response_model_exclude_none=True)
def send_email(payload: SendEmailRequest, db: Session = Depends(get_db)):
    service = OutreachService(db)
    return service.send_email(
        payload.to,
        payload.subject,
        payload.body,
        client_id=payload.client_id,
        client_name=payload.client_name,
        reply_to=payload.client_email,
        use_brevo=payload.use_brevo,
        template_id=payload.template_id,
        update_status=payload.update_status,
    )
