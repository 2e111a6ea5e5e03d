import re
from datetime import date
from io import BytesIO

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from clients_finder.models.client import Client
from clients_finder.services.client_filters import ClientFilterParams, apply_client_filters

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MAX_COLUMN_WIDTH = 50
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")

COLUMNS = [
    ("Name", lambda c: c.name),
    ("Category", lambda c: c.category or ""),
    ("Status", lambda c: c.status),
    ("Address", lambda c: c.address),
    ("Street", lambda c: c.street or ""),
    ("City", lambda c: c.city or ""),
    ("State", lambda c: c.state or ""),
    ("Postcode", lambda c: c.postcode or ""),
    ("Country", lambda c: c.country or ""),
    ("Phone", lambda c: c.phone or ""),
    ("Email", lambda c: c.email or ""),
    ("Website", lambda c: c.website or ""),
    ("Latitude", lambda c: c.latitude),
    ("Longitude", lambda c: c.longitude),
    ("Data Source", lambda c: c.datasource or ""),
    ("Created At", lambda c: c.created_at.isoformat() if c.created_at else ""),
    ("Updated At", lambda c: c.updated_at.isoformat() if c.updated_at else ""),
]


def _slug(value: str) -> str:
    # Content-Disposition is latin-1 encoded; keep the name ASCII
    return UNSAFE_FILENAME_CHARS.sub("_", value)


def export_filename(params: ClientFilterParams, today: date = None) -> str:
    today = today or date.today()
    parts = []
    if params.category:
        parts.append(f"category-{_slug(params.category)}")
    status = params.valid_status()
    if status:
        parts.append(f"status-{status}")
    if params.city:
        parts.append(f"city-{_slug(params.city)}")
    suffix = f"_{'_'.join(parts)}" if parts else ""
    return f"clients{suffix}_{today.isoformat()}.xlsx"


class ExportService:
    def __init__(self, db: Session):
        self.db = db

    def fetch_rows(self, params: ClientFilterParams):
        query = apply_client_filters(self.db.query(Client), params)
        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()

    def build_workbook(self, clients) -> BytesIO:
        wb = Workbook()
        ws = wb.active
        ws.title = "Clients"

        headers = [name for name, _ in COLUMNS]
        ws.append(headers)

        widths = [len(h) for h in headers]
        for client in clients:
            row = [getter(client) for _, getter in COLUMNS]
            ws.append(row)
            for i, value in enumerate(row):
                widths[i] = max(widths[i], len(str(value if value is not None else "")))

        # Auto-size columns
        for i, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(i)].width = min(width + 2, MAX_COLUMN_WIDTH)

        output = BytesIO()
        wb.save(output)
        output.seek(0)
        return output

    def export_clients(self, params: ClientFilterParams):
        """Returns (xlsx buffer, filename, row count)."""
        clients = self.fetch_rows(params)
        return self.build_workbook(clients), export_filename(params), len(clients)
