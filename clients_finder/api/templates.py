from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session
from typing import Optional

from clients_finder.core.database import get_db
from clients_finder.core.errors import ValidationError
from clients_finder.schemas.ingestion import UploadResponse
from clients_finder.schemas.template import (
    TemplateCreate,
    TemplateEnvelope,
    TemplateListResponse,
    TemplatePreview,
    TemplateUpdate,
)
from clients_finder.services.client_service import ClientService
from clients_finder.services.storage_service import StorageService
from clients_finder.services.template_service import TemplateService

router = APIRouter(prefix="/api/templates", tags=["Email Templates"])


# --- READ ALL ---
@router.get("", response_model=TemplateListResponse)
def list_templates(
    target_type: Optional[str] = Query(None, alias="targetType"),
    db: Session = Depends(get_db),
):
    service = TemplateService(db)
    return {"success": True, "templates": service.get_all_templates(target_type)}


# --- CREATE ---
@router.post("", response_model=TemplateEnvelope)
def create_template(payload: TemplateCreate, db: Session = Depends(get_db)):
    service = TemplateService(db)
    return {"success": True, "template": service.create_template(payload)}


# --- ATTACHMENT UPLOAD (storage API) ---
@router.post("/upload", response_model=UploadResponse)
def upload_attachment(file: Optional[UploadFile] = File(None)):
    if file is None:
        raise ValidationError("No file provided")

    data = file.file.read()
    result = StorageService().upload_to_storage_api(file.filename, data, file.content_type)
    return {"success": True, **result}


# --- READ ONE ---
@router.get("/{template_id}", response_model=TemplateEnvelope)
def get_template(template_id: int, db: Session = Depends(get_db)):
    service = TemplateService(db)
    return {"success": True, "template": service.get_template(template_id)}


# --- PREVIEW FOR A CLIENT ---
@router.get("/{template_id}/preview", response_model=TemplatePreview)
def preview_template(template_id: int, client_id: str, db: Session = Depends(get_db)):
    client = ClientService(db).get_client(client_id)
    return TemplateService(db).preview(template_id, client)


# --- UPDATE ---
@router.patch("/{template_id}", response_model=TemplateEnvelope)
def update_template(template_id: int, payload: TemplateUpdate, db: Session = Depends(get_db)):
    service = TemplateService(db)
    return {"success": True, "template": service.update_template(template_id, payload)}


# --- DELETE ---
@router.delete("/{template_id}")
def delete_template(template_id: int, db: Session = Depends(get_db)):
    service = TemplateService(db)
    service.delete_template(template_id)
    return {"success": True, "message": "Template deleted successfully"}
