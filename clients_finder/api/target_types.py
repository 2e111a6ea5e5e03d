from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clients_finder.core.database import get_db
from clients_finder.schemas.template import TargetTypeCreate, TargetTypeEnvelope, TargetTypeListResponse
from clients_finder.services.template_service import TemplateService

router = APIRouter(prefix="/api/target-types", tags=["Target Types"])


@router.get("", response_model=TargetTypeListResponse)
def list_target_types(db: Session = Depends(get_db)):
    service = TemplateService(db)
    return {"success": True, "customTargets": service.list_target_types()}


@router.post("", response_model=TargetTypeEnvelope)
def create_target_type(payload: TargetTypeCreate, db: Session = Depends(get_db)):
    service = TemplateService(db)
    return {"success": True, "customTargetType": service.create_target_type(payload)}
