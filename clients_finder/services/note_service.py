from sqlalchemy.orm import Session

from clients_finder.core.errors import NotFoundError, ValidationError
from clients_finder.models.client import Client
from clients_finder.models.note import Note


class NoteService:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _clean(content):
        if not content or not content.strip():
            raise ValidationError("Note content is required")
        return content.strip()

    def list_notes(self, client_id: str):
        """Newest first."""
        return self.db.query(Note)\
            .filter(Note.client_id == client_id)\
            .order_by(Note.created_at.desc(), Note.id.desc())\
            .all()

    def create_note(self, client_id: str, content: str) -> Note:
        content = self._clean(content)
        if not self.db.get(Client, client_id):
            raise NotFoundError("Client not found")

        note = Note(client_id=client_id, content=content)
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    def get_note(self, client_id: str, note_id: int) -> Note:
        note = self.db.query(Note).filter(Note.id == note_id, Note.client_id == client_id).first()
        if not note:
            raise NotFoundError("Note not found")
        return note

    def update_note(self, client_id: str, note_id: int, content: str) -> Note:
        content = self._clean(content)
        note = self.get_note(client_id, note_id)
        note.content = content
        self.db.commit()
        self.db.refresh(note)
        return note

    def delete_note(self, client_id: str, note_id: int):
        note = self.get_note(client_id, note_id)
        self.db.delete(note)
        self.db.commit()
