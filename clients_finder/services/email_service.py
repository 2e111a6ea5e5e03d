import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

import requests

from clients_finder.core.config import settings

logger = logging.getLogger(__name__)

# Error messages that mean the recipient address doesn't exist
RECIPIENT_NOT_FOUND_ERRORS = [
    "550",
    "user unknown",
    "does not exist",
    "no such user",
    "invalid address",
    "address not found",
    "recipient rejected",
    "mailbox unavailable",
]

BREVO_HTML_SHELL = """
<html>
  <body>
    <pre style="font-family: Arial, sans-serif; white-space: pre-wrap; word-wrap: break-word;">
{body}
    </pre>
  </body>
</html>
"""


def _classify(error_text: str) -> str:
    lowered = error_text.lower()
    if any(err in lowered for err in RECIPIENT_NOT_FOUND_ERRORS):
        return f"RECIPIENT_NOT_FOUND: {error_text}"
    return error_text


class SMTPEmailService:
    """Direct delivery through the configured SMTP relay."""

    method = "SMTP"

    def __init__(self):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.secure = settings.SMTP_SECURE
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.from_address = settings.SMTP_FROM or settings.SMTP_USER

    def _open(self) -> smtplib.SMTP:
        if self.secure:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=30)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=30)
        try:
            if not self.secure:
                server.ehlo()
                server.starttls()
                server.ehlo()
            if self.user and self.password:
                # Gmail app passwords are shown with spaces
                server.login(self.user, self.password.replace(" ", ""))
        except Exception:
            server.close()
            raise
        return server

    def send_email(self, to_email: str, subject: str, body: str,
                   to_name: Optional[str] = None, reply_to: Optional[str] = None):
        """Returns (success, message_id, error)."""
        if not self.from_address:
            return False, None, "SMTP sender not configured (set SMTP_FROM or SMTP_USER)"

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_email
        if reply_to:
            msg["Reply-To"] = reply_to
        message_id = make_msgid()
        msg["Message-ID"] = message_id
        msg.attach(MIMEText(body, "html", "utf-8"))

        try:
            with self._open() as server:
                server.sendmail(self.from_address, [to_email], msg.as_string())
            logger.info(f"✅ SMTP email sent to {to_email}")
            return True, message_id, None

        except smtplib.SMTPRecipientsRefused as e:
            logger.warning(f"📭 Recipient refused: {to_email}: {e}")
            return False, None, f"RECIPIENT_NOT_FOUND: {e}"

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ SMTP error for {to_email}: {e}")
            return False, None, _classify(str(e))


class BrevoEmailService:
    """Brevo transactional email API (POST /v3/smtp/email)."""

    method = "BREVO"

    def __init__(self):
        self.api_url = settings.BREVO_API_URL
        self.api_key = settings.BREVO_API_KEY
        self.from_address = settings.BREVO_SENDER_EMAIL
        self.from_name = settings.BREVO_SENDER_NAME

    def build_payload(self, to_email: str, subject: str, body: str,
                      to_name: Optional[str] = None, reply_to: Optional[str] = None) -> dict:
        return {
            "sender": {"email": self.from_address, "name": self.from_name or "Clients Finder"},
            "to": [{"email": to_email, "name": to_name or "Recipient"}],
            "subject": subject,
            "htmlContent": BREVO_HTML_SHELL.format(body=body),
            "replyTo": {"email": reply_to or self.from_address},
        }

    def send_email(self, to_email: str, subject: str, body: str,
                   to_name: Optional[str] = None, reply_to: Optional[str] = None):
        """Returns (success, message_id, error)."""
        if not self.api_key:
            return False, None, "Brevo API key not configured"
        if not self.from_address:
            return False, None, "Brevo sender email not configured (set BREVO_SENDER_EMAIL)"

        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "api-key": self.api_key,
        }

        try:
            response = requests.post(
                self.api_url,
                json=self.build_payload(to_email, subject, body, to_name, reply_to),
                headers=headers,
                timeout=30,
            )
            try:
                response_data = response.json()
            except ValueError:
                response_data = {"raw": response.text}

            if response.ok:
                message_id = response_data.get("messageId")
                logger.info(f"✅ Brevo accepted email for {to_email} [id={message_id}]")
                return True, message_id, None

            if response.status_code in (400, 422):
                logger.warning(f"📭 Brevo rejected {to_email}: {response_data}")
                return False, None, _classify(f"Brevo API error: {response_data}")

            logger.error(f"❌ Brevo error for {to_email}: {response_data}")
            return False, None, f"Brevo API error: {response_data}"

        except requests.exceptions.ConnectionError as e:
            logger.error(f"🔌 Connection error while sending to {to_email}: {e}")
            return False, None, f"CONNECTION_ERROR: {e}"

        except requests.exceptions.Timeout as e:
            logger.error(f"⏱️ Timeout while sending to {to_email}: {e}")
            return False, None, f"TIMEOUT_ERROR: {e}"

        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Failed to send email to {to_email}: {e}")
            return False, None, str(e)


def choose_email_service(use_brevo: bool):
    """Brevo only when asked for AND configured; SMTP otherwise."""
    if use_brevo and settings.BREVO_API_KEY:
        return BrevoEmailService()
    return SMTPEmailService()


def append_attachment_links(body: str, attachments) -> str:
    if not attachments:
        return body
    links = "".join(
        f'<li><a href="{html.escape(url, quote=True)}">{html.escape(url.rsplit("/", 1)[-1] or url)}</a></li>'
        for url in attachments
    )
    return f"{body}<hr/><p>Attachments:</p><ul>{links}</ul>"
