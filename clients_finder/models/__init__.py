from .client import Client, ClientStatus
from .note import Note
from .email_template import EmailTemplate
from .email_history import EmailHistory
from .custom_target_type import CustomTargetType
from .automation_job import AutomationJob

__all__ = [
    "Client",
    "ClientStatus",
    "Note",
    "EmailTemplate",
    "EmailHistory",
    "CustomTargetType",
    "AutomationJob",
]
