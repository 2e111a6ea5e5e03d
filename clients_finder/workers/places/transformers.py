import json

from clients_finder.models.client import ClientStatus


def _first(*values):
    """First truthy value, or None."""
    for v in values:
        if v:
            return v
    return None


def _coordinates(feature: dict, props: dict):
    lat, lon = props.get("lat"), props.get("lon")
    if lat is None or lon is None:
        coords = (feature.get("geometry") or {}).get("coordinates") or []
        if len(coords) >= 2:
            lon, lat = coords[0], coords[1]
    return (lat or 0.0), (lon or 0.0)


def map_place(feature: dict, category: str) -> dict:
    """
    Geoapify feature -> Client column values.
    Each target attribute falls back through several source fields.
    """
    props = feature.get("properties") or {}
    contact = props.get("contact") or {}
    datasource = props.get("datasource") or {}
    raw = datasource.get("raw") or {}

    categories = props.get("categories") or []
    lat, lon = _coordinates(feature, props)

    return {
        "place_id": props.get("place_id"),
        "name": _first(props.get("name"), props.get("address_line1")) or "Unknown",
        "category": "; ".join(categories) if categories else (category or None),
        "address": _first(props.get("formatted"), props.get("address_line1")) or "Unknown",
        "street": _first(props.get("street"), props.get("address_line1")),
        "city": props.get("city") or None,
        "state": props.get("state") or None,
        "postcode": props.get("postcode") or None,
        "country": props.get("country") or None,
        "country_code": props.get("country_code") or None,
        "phone": _first(contact.get("phone"), raw.get("phone")),
        "email": _first(contact.get("email"), raw.get("email")),
        "website": _first(contact.get("website"), raw.get("website")),
        "latitude": lat,
        "longitude": lon,
        "status": ClientStatus.PENDING.value,
        "opening_hours": json.dumps(props["opening_hours"]) if props.get("opening_hours") else None,
        "facilities": json.dumps(props["facilities"]) if props.get("facilities") else None,
        "datasource": datasource.get("sourcename") or None,
    }
