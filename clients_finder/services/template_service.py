import re
from typing import Optional

from sqlalchemy.orm import Session

from clients_finder.core.errors import NotFoundError, ValidationError
from clients_finder.models.client import Client
from clients_finder.models.custom_target_type import CustomTargetType, DEFAULT_COLOR
from clients_finder.models.email_template import (
    EmailTemplate,
    BUILTIN_TARGET_TYPES,
    CUSTOM_TARGET_PREFIX,
    TARGET_HAS_WEBSITE,
    TARGET_NO_WEBSITE,
)
from clients_finder.schemas.template import TemplateCreate, TemplateUpdate, TargetTypeCreate

# Placeholder -> Client attribute. Missing values render as "".
PLACEHOLDERS = {
    "CLIENT_NAME": "name",
    "CLIENT_ADDRESS": "address",
    "CLIENT_EMAIL": "email",
    "CLIENT_PHONE": "phone",
    "CLIENT_WEBSITE": "website",
    "CLIENT_CITY": "city",
    "CLIENT_STATE": "state",
    "CLIENT_CATEGORY": "category",
    "CLIENT_COUNTRY": "country",
}

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(" + "|".join(PLACEHOLDERS) + r")\s*\}\}")


def render_template(text: Optional[str], client: Client) -> str:
    """Substitute every {{CLIENT_*}} token with the client's field value."""
    if not text:
        return ""

    def _sub(match):
        value = getattr(client, PLACEHOLDERS[match.group(1)], None)
        return "" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_sub, text)


def template_applies_to(template: EmailTemplate, client: Client) -> bool:
    if template.target_type == TARGET_HAS_WEBSITE:
        return client.has_website
    if template.target_type == TARGET_NO_WEBSITE:
        return not client.has_website
    # ALL and custom audiences are always offered
    return True


class TemplateService:
    def __init__(self, db: Session):
        self.db = db

    # ---------------------------------------------------------
    # VALIDATION
    # ---------------------------------------------------------
    def _validate_target_type(self, target_type: str):
        if target_type in BUILTIN_TARGET_TYPES:
            return
        if target_type.startswith(CUSTOM_TARGET_PREFIX):
            custom_id = target_type[len(CUSTOM_TARGET_PREFIX):]
            if custom_id.isdigit() and self.db.get(CustomTargetType, int(custom_id)):
                return
        raise ValidationError(
            "Invalid targetType. Must be: ALL, HAS_WEBSITE, NO_WEBSITE or an existing CUSTOM_<id>"
        )

    # ---------------------------------------------------------
    # CRUD
    # ---------------------------------------------------------
    def get_all_templates(self, target_type: Optional[str] = None):
        """Fetch all templates ordered by newest first."""
        query = self.db.query(EmailTemplate)
        if target_type:
            query = query.filter(EmailTemplate.target_type == target_type)
        return query.order_by(EmailTemplate.created_at.desc(), EmailTemplate.id.desc()).all()

    def get_template(self, template_id: int) -> EmailTemplate:
        template = self.db.get(EmailTemplate, template_id)
        if not template:
            raise NotFoundError("Template not found")
        return template

    def create_template(self, data: TemplateCreate) -> EmailTemplate:
        missing = [
            label for label, value in (
                ("name", data.name),
                ("subject", data.subject),
                ("body", data.body),
                ("targetType", data.target_type),
            )
            if not value
        ]
        if missing:
            raise ValidationError("Missing required fields: " + ", ".join(missing))

        self._validate_target_type(data.target_type)

        new_template = EmailTemplate(
            name=data.name,
            subject=data.subject,
            body=data.body,
            target_type=data.target_type,
            attachments=list(data.attachments or []),
        )
        self.db.add(new_template)
        self.db.commit()
        self.db.refresh(new_template)
        return new_template

    def update_template(self, template_id: int, data: TemplateUpdate) -> EmailTemplate:
        template = self.get_template(template_id)

        # Update only provided fields
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("target_type") is not None:
            self._validate_target_type(update_data["target_type"])

        for key, value in update_data.items():
            if value is None:
                continue
            setattr(template, key, value)

        self.db.commit()
        self.db.refresh(template)
        return template

    def delete_template(self, template_id: int):
        template = self.get_template(template_id)
        self.db.delete(template)
        self.db.commit()

    # ---------------------------------------------------------
    # PERSONALIZATION
    # ---------------------------------------------------------
    def templates_for_client(self, client: Client):
        return [t for t in self.get_all_templates() if template_applies_to(t, client)]

    def preview(self, template_id: int, client: Client) -> dict:
        template = self.get_template(template_id)
        return {
            "success": True,
            "template_id": template.id,
            "client_id": client.id,
            "subject": render_template(template.subject, client),
            "body": render_template(template.body, client),
            "attachments": list(template.attachments or []),
        }

    # ---------------------------------------------------------
    # CUSTOM TARGET TYPES
    # ---------------------------------------------------------
    def list_target_types(self):
        return self.db.query(CustomTargetType)\
            .order_by(CustomTargetType.created_at.desc(), CustomTargetType.id.desc())\
            .all()

    def create_target_type(self, data: TargetTypeCreate) -> CustomTargetType:
        if not data.name or not data.name.strip():
            raise ValidationError("Missing required field: name")

        target = CustomTargetType(
            name=data.name.strip(),
            description=(data.description or "").strip() or None,
            color=data.color or DEFAULT_COLOR,
        )
        self.db.add(target)
        self.db.commit()
        self.db.refresh(target)
        return target
