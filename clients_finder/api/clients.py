from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Optional

from clients_finder.core.database import get_db
from clients_finder.core.errors import ValidationError
from clients_finder.schemas.client import (
    ClientDetailResponse,
    ClientListResponse,
    GeocodeRequest,
    GeocodeResponse,
    NavigationResponse,
    StatusUpdate,
)
from clients_finder.schemas.email import EmailHistoryListResponse
from clients_finder.schemas.ingestion import AutoFetchRequest, AutoFetchResponse
from clients_finder.schemas.template import TemplateListResponse
from clients_finder.services.client_filters import ClientFilterParams
from clients_finder.services.client_service import ClientService
from clients_finder.services.export_service import ExportService, XLSX_MEDIA_TYPE
from clients_finder.services.template_service import TemplateService
from clients_finder.workers.places.geoapify_client import GeoapifyClient
from clients_finder.workers.places.main_worker import run_auto_fetch

router = APIRouter(prefix="/api/clients", tags=["Clients"])


def client_filters(
    status: Optional[str] = None,
    category: Optional[str] = None,
    city: Optional[str] = None,
    has_website: Optional[str] = Query(None, alias="hasWebsite"),
    has_phone: Optional[str] = Query(None, alias="hasPhone"),
    has_email: Optional[str] = Query(None, alias="hasEmail"),
    search: Optional[str] = None,
) -> ClientFilterParams:
    return ClientFilterParams.from_query(
        status=status,
        category=category,
        city=city,
        has_website=has_website,
        has_phone=has_phone,
        has_email=has_email,
        search=search,
    )


# --- LIST ---
@router.get("", response_model=ClientListResponse)
def list_clients(
    params: ClientFilterParams = Depends(client_filters),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    service = ClientService(db)
    return service.list_clients(params, limit=limit, offset=offset)


# --- EXPORT (xlsx) ---
@router.get("/export")
def export_clients(
    params: ClientFilterParams = Depends(client_filters),
    db: Session = Depends(get_db),
):
    service = ExportService(db)
    buffer, filename, _ = service.export_clients(params)

    return StreamingResponse(
        iter([buffer.getvalue()]),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# --- INGESTION ---
@router.post("/auto-fetch", response_model=AutoFetchResponse)
def auto_fetch(payload: Optional[AutoFetchRequest] = None, db: Session = Depends(get_db)):
    payload = payload or AutoFetchRequest()
    return run_auto_fetch(
        db,
        radius=payload.radius,
        batch_size=payload.batch_size,
        max_batches_per_category=payload.max_batches_per_category,
        category=payload.category,
        use_multiple_locations=payload.use_multiple_locations,
    )


# --- GEOCODE ---
@router.post("/geocode", response_model=GeocodeResponse)
def geocode(payload: GeocodeRequest):
    if not payload.address or not payload.address.strip():
        raise ValidationError("Address is required")
    return GeoapifyClient().geocode(payload.address.strip())


# --- READ ONE ---
@router.get("/{client_id}", response_model=ClientDetailResponse)
def get_client(client_id: str, db: Session = Depends(get_db)):
    service = ClientService(db)
    return {"success": True, "client": service.get_client(client_id)}


# --- UPDATE STATUS ---
@router.patch("/{client_id}", response_model=ClientDetailResponse)
def update_client_status(client_id: str, payload: StatusUpdate, db: Session = Depends(get_db)):
    service = ClientService(db)
    return {"success": True, "client": service.update_status(client_id, payload.status)}


# --- DELETE ---
@router.delete("/{client_id}")
def delete_client(client_id: str, db: Session = Depends(get_db)):
    service = ClientService(db)
    service.delete_client(client_id)
    return {"success": True, "message": "Client deleted successfully"}


# --- PREV / NEXT ---
@router.get("/{client_id}/navigation", response_model=NavigationResponse)
def navigate(
    client_id: str,
    direction: Optional[str] = None,
    params: ClientFilterParams = Depends(client_filters),
    db: Session = Depends(get_db),
):
    service = ClientService(db)
    return {"clientId": service.navigate(client_id, direction, params)}


# --- EMAIL HISTORY ---
@router.get("/{client_id}/email-history", response_model=EmailHistoryListResponse)
def email_history(client_id: str, db: Session = Depends(get_db)):
    service = ClientService(db)
    return {"success": True, "emailHistory": service.email_history(client_id)}


# --- TEMPLATES THAT FIT THIS CLIENT ---
@router.get("/{client_id}/templates", response_model=TemplateListResponse)
def templates_for_client(client_id: str, db: Session = Depends(get_db)):
    client = ClientService(db).get_client(client_id)
    return {"success": True, "templates": TemplateService(db).templates_for_client(client)}
