from typing import Optional

from sqlalchemy.orm import Session

from clients_finder.core.errors import NotFoundError, ValidationError
from clients_finder.models.client import Client, ClientStatus
from clients_finder.models.email_history import EmailHistory
from clients_finder.services.client_filters import ClientFilterParams, apply_client_filters


class ClientService:
    def __init__(self, db: Session):
        self.db = db

    # ---------------------------------------------------------
    # 1. LIST (filters + pagination)
    # ---------------------------------------------------------
    def filtered_query(self, params: ClientFilterParams):
        return apply_client_filters(self.db.query(Client), params)

    def list_clients(self, params: ClientFilterParams, limit: Optional[int] = None, offset: Optional[int] = None):
        query = self.filtered_query(params)
        total = query.count()

        query = query.order_by(Client.created_at.desc(), Client.id.desc())
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        return {"success": True, "total": total, "clients": query.all()}

    # ---------------------------------------------------------
    # 2. SINGLE CLIENT
    # ---------------------------------------------------------
    def get_client(self, client_id: str) -> Client:
        client = self.db.get(Client, client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    def update_status(self, client_id: str, status: Optional[str]) -> Client:
        if not status or status not in ClientStatus.values():
            raise ValidationError(
                "Invalid status. Must be one of: " + ", ".join(ClientStatus.values())
            )

        client = self.get_client(client_id)
        client.status = status
        self.db.commit()
        self.db.refresh(client)
        return client

    def delete_client(self, client_id: str):
        client = self.get_client(client_id)
        self.db.delete(client)
        self.db.commit()

    # ---------------------------------------------------------
    # 3. PREV / NEXT NAVIGATION (wraps around)
    # ---------------------------------------------------------
    def navigate(self, client_id: str, direction: Optional[str], params: ClientFilterParams) -> Optional[str]:
        current = self.get_client(client_id)

        if direction == "next":
            newer = self.filtered_query(params).filter(Client.created_at > current.created_at)
            target = newer.order_by(Client.created_at.asc()).first()
            if not target:
                target = self.filtered_query(params).order_by(Client.created_at.asc()).first()
        elif direction == "prev":
            older = self.filtered_query(params).filter(Client.created_at < current.created_at)
            target = older.order_by(Client.created_at.desc()).first()
            if not target:
                target = self.filtered_query(params).order_by(Client.created_at.desc()).first()
        else:
            target = None

        return target.id if target else None

    # ---------------------------------------------------------
    # 4. EMAIL HISTORY
    # ---------------------------------------------------------
    def email_history(self, client_id: str):
        return self.db.query(EmailHistory)\
            .filter(EmailHistory.client_id == client_id)\
            .order_by(EmailHistory.sent_at.desc())\
            .all()
