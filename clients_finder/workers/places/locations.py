"""
Seed categories and locations for the places auto-fetch.

Geoapify caps a single query at ~500 results, so the worker fans one category
out over several city centers to reach beyond that.
"""

CATEGORIES = [
    "education.school",
    "catering.restaurant",
    "healthcare.hospital",
    "healthcare.pharmacy",
    "commercial.supermarket",
    "service.beauty",
    "entertainment.cinema",
    "accommodation.hotel",
    "commercial.shopping_mall",
    "sport.fitness",
]

NEPAL_LOCATIONS = [
    {"name": "Kathmandu", "lat": 27.7172, "lon": 85.3240},
    {"name": "Pokhara", "lat": 28.2096, "lon": 83.9856},
    {"name": "Lalitpur", "lat": 27.6661, "lon": 85.3247},
    {"name": "Biratnagar", "lat": 26.4525, "lon": 87.2718},
    {"name": "Bharatpur", "lat": 27.6800, "lon": 84.4344},
    {"name": "Birgunj", "lat": 27.0099, "lon": 84.8797},
    {"name": "Dharan", "lat": 26.8150, "lon": 87.2820},
    {"name": "Butwal", "lat": 27.7000, "lon": 83.4480},
    {"name": "Hetauda", "lat": 27.4283, "lon": 85.0331},
    {"name": "Janakpur", "lat": 26.7288, "lon": 85.9242},
]

DEFAULT_LOCATION = NEPAL_LOCATIONS[0]  # Kathmandu


def get_locations(use_multiple_locations: bool = True) -> list[dict]:
    return NEPAL_LOCATIONS if use_multiple_locations else [DEFAULT_LOCATION]


def get_categories(category: str = None) -> list[str]:
    return [category] if category else CATEGORIES
