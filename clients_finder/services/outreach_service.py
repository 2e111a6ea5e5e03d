import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from clients_finder.core.errors import NotFoundError, UpstreamError, ValidationError
from clients_finder.models.client import Client, ClientStatus
from clients_finder.models.email_history import EmailHistory, STATUS_SENT, STATUS_FAILED
from clients_finder.models.email_template import EmailTemplate
from clients_finder.services.email_service import append_attachment_links, choose_email_service
from clients_finder.services.template_service import render_template

logger = logging.getLogger(__name__)


class OutreachService:
    """
    Sends one outreach email and records the outcome.

    With a client attached, a failed send becomes a FAILED history row and
    a {success: False} result. Without one there is nothing to record, so the
    failure is raised to the caller.
    """

    def __init__(self, db: Session, email_service_factory=None):
        self.db = db
        self.email_service_factory = email_service_factory or choose_email_service

    def _resolve_content(self, subject, body, template: Optional[EmailTemplate], client: Optional[Client]):
        if template and client:
            subject = subject or render_template(template.subject, client)
            body = body or render_template(template.body, client)
        if template:
            body = append_attachment_links(body or "", template.attachments)
        return subject, body

    def send_email(
        self,
        to: Optional[str],
        subject: Optional[str],
        body: Optional[str],
        client_id: Optional[str] = None,
        client_name: Optional[str] = None,
        reply_to: Optional[str] = None,
        use_brevo: bool = False,
        template_id: Optional[int] = None,
        update_status: bool = True,
    ) -> dict:
        client = None
        if client_id:
            client = self.db.get(Client, client_id)
            if not client:
                raise NotFoundError("Client not found")

        template = None
        if template_id is not None:
            template = self.db.get(EmailTemplate, template_id)
            if not template:
                raise NotFoundError("Template not found")

        to = to or (client.email if client else None)
        subject, body = self._resolve_content(subject, body, template, client)

        if not to or not subject or not body:
            raise ValidationError("Missing required fields: to, subject, body")

        service = self.email_service_factory(use_brevo)
        success, message_id, error = service.send_email(
            to,
            subject,
            body,
            to_name=client_name or (client.name if client else None),
            reply_to=reply_to,
        )

        if not client:
            if not success:
                raise UpstreamError(error or "Failed to send email")
            return {
                "success": True,
                "method": service.method,
                "message": f"Email sent via {service.method} successfully",
                "message_id": message_id,
            }

        history = EmailHistory(
            client_id=client.id,
            recipient=to,
            subject=subject,
            body=body,
            method=service.method,
            status=STATUS_SENT if success else STATUS_FAILED,
            failure_reason=None if success else error,
            message_id=message_id,
            sent_at=datetime.utcnow(),
        )
        self.db.add(history)

        if success and update_status and client.status == ClientStatus.PENDING.value:
            client.status = ClientStatus.CONTACTED.value
            logger.info(f"📬 Client {client.id} moved PENDING -> CONTACTED")

        self.db.commit()
        self.db.refresh(history)

        if success:
            return {
                "success": True,
                "method": service.method,
                "message": f"Email sent via {service.method} successfully",
                "message_id": message_id,
                "history_id": history.id,
            }

        logger.error(f"❌ Email to client {client.id} failed: {error}")
        return {
            "success": False,
            "method": service.method,
            "error": error,
            "history_id": history.id,
        }
