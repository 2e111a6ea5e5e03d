from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clients_finder.core.database import get_db
from clients_finder.schemas.note import NoteEnvelope, NoteListResponse, NoteWrite
from clients_finder.services.note_service import NoteService

router = APIRouter(prefix="/api/clients/{client_id}/notes", tags=["Notes"])


@router.get("", response_model=NoteListResponse)
def list_notes(client_id: str, db: Session = Depends(get_db)):
    service = NoteService(db)
    return {"success": True, "notes": service.list_notes(client_id)}


@router.post("", response_model=NoteEnvelope)
def create_note(client_id: str, payload: NoteWrite, db: Session = Depends(get_db)):
    service = NoteService(db)
    return {"success": True, "note": service.create_note(client_id, payload.content)}


@router.patch("/{note_id}", response_model=NoteEnvelope)
def update_note(client_id: str, note_id: int, payload: NoteWrite, db: Session = Depends(get_db)):
    service = NoteService(db)
    return {"success": True, "note": service.update_note(client_id, note_id, payload.content)}


@router.delete("/{note_id}")
def delete_note(client_id: str, note_id: int, db: Session = Depends(get_db)):
    service = NoteService(db)
    service.delete_note(client_id, note_id)
    return {"success": True, "message": "Note deleted successfully"}
