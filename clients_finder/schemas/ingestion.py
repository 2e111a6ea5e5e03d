from pydantic import BaseModel
from typing import List, Optional


class AutoFetchRequest(BaseModel):
    radius: str = "25000"  # meters, per location
    batch_size: int = 100
    max_batches_per_category: int = 5  # 5 x 100 = Geoapify's 500 result cap per query
    category: Optional[str] = None  # fetch a single category only
    use_multiple_locations: bool = True


class CategoryStats(BaseModel):
    category: str
    total_fetched: int
    new_clients: int
    existing_clients: int
    completed: bool


class AutoFetchSummary(BaseModel):
    total_fetched: int
    new_clients: int
    existing_clients: int
    categories_processed: int


class AutoFetchResponse(BaseModel):
    success: bool = True
    job_id: Optional[int] = None
    stats: List[CategoryStats]
    summary: AutoFetchSummary


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    filename: str
    size: int
    type: str
