from fastapi import APIRouter, File, UploadFile
from typing import Optional

from clients_finder.core.errors import ValidationError
from clients_finder.schemas.ingestion import UploadResponse
from clients_finder.services.storage_service import StorageService

router = APIRouter(prefix="/api", tags=["Uploads"])


# Signed PUT to the S3-compatible bucket
@router.post("/upload", response_model=UploadResponse)
def upload_file(file: Optional[UploadFile] = File(None)):
    if file is None:
        raise ValidationError("No file provided")

    data = file.file.read()
    result = StorageService().upload_to_s3(file.filename, data, file.content_type)
    return {"success": True, **result}
