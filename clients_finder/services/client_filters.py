"""
Dynamic filter builder for the client list, navigation and export endpoints.

Every optional parameter turns into zero or more SQLAlchemy predicates; the
caller ANDs them together, so adding a parameter can only narrow the result.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import and_, or_

from clients_finder.models.client import Client, ClientStatus

# Columns the free-text search looks at (OR across fields, AND across words)
SEARCH_FIELDS = (
    Client.name,
    Client.category,
    Client.address,
    Client.city,
    Client.phone,
    Client.email,
    Client.website,
)


def parse_flag(value) -> Optional[bool]:
    """'true' / 'false' query strings -> bool. Anything else means 'no filter'."""
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    value = str(value).strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return None


@dataclass
class ClientFilterParams:
    status: Optional[str] = None
    category: Optional[str] = None
    city: Optional[str] = None
    has_website: Optional[bool] = None
    has_phone: Optional[bool] = None
    has_email: Optional[bool] = None
    search: Optional[str] = None

    @classmethod
    def from_query(cls, status=None, category=None, city=None,
                   has_website=None, has_phone=None, has_email=None, search=None):
        return cls(
            status=status,
            category=category,
            city=city,
            has_website=parse_flag(has_website),
            has_phone=parse_flag(has_phone),
            has_email=parse_flag(has_email),
            search=search,
        )

    def valid_status(self) -> Optional[str]:
        if not self.status:
            return None
        status = self.status.strip().upper()
        return status if status in ClientStatus.values() else None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, term: str):
    return column.ilike(f"%{_escape_like(term)}%", escape="\\")


def _present(column):
    return and_(column.isnot(None), column != "")


def _missing(column):
    return or_(column.is_(None), column == "")


def _presence(column, flag: Optional[bool]):
    if flag is True:
        return _present(column)
    if flag is False:
        return _missing(column)
    return None


def search_words(search: Optional[str]) -> list[str]:
    if not search:
        return []
    return [w for w in search.split() if w]


def build_search_filter(search: Optional[str]):
    """Every word must hit at least one of SEARCH_FIELDS."""
    words = search_words(search)
    if not words:
        return None
    return and_(*[or_(*[_contains(col, word) for col in SEARCH_FIELDS]) for word in words])


def build_client_filters(params: ClientFilterParams) -> list:
    conditions = []

    status = params.valid_status()
    if status:
        conditions.append(Client.status == status)

    if params.category and params.category.strip() and params.category != "all":
        conditions.append(_contains(Client.category, params.category.strip()))

    if params.city and params.city.strip():
        conditions.append(_contains(Client.city, params.city.strip()))

    for column, flag in (
        (Client.website, params.has_website),
        (Client.phone, params.has_phone),
        (Client.email, params.has_email),
    ):
        predicate = _presence(column, flag)
        if predicate is not None:
            conditions.append(predicate)

    search = build_search_filter(params.search)
    if search is not None:
        conditions.append(search)

    return conditions


def apply_client_filters(query, params: ClientFilterParams):
    conditions = build_client_filters(params)
    if conditions:
        query = query.filter(and_(*conditions))
    return query
