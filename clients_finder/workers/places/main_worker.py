"""
clients_finder/workers/places/main_worker.py

Places auto-fetch. Imports businesses from Geoapify into the clients table:

  For each category:
    For each seed location:
      1. Page through /v2/places (limit = batch_size, offset += batch_size)
      2. Map each feature to Client columns (transformers.map_place)
      3. Skip features already stored (by place_id), create the rest
      4. Stop on an empty/short page, the batch cap, or an error

Requests are sequential with a short pause between batches. A failing batch
is logged and ends that location's loop; the run itself keeps going.
"""

import logging
import time
import traceback
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clients_finder.core.config import settings
from clients_finder.core.database import SessionLocal
from clients_finder.core.errors import AppError
from clients_finder.models.automation_job import AutomationJob
from clients_finder.models.client import Client
from clients_finder.workers.places.geoapify_client import GeoapifyClient
from clients_finder.workers.places.locations import get_categories, get_locations
from clients_finder.workers.places.transformers import map_place

logger = logging.getLogger(__name__)

JOB_TYPE = "places_auto_fetch"


# ══════════════════════════════════════════════════════════════════════════════
# STORAGE
# ══════════════════════════════════════════════════════════════════════════════

def store_places(db: Session, features: list[dict], category: str) -> tuple[int, int, int]:
    """
    Persists one page of features. Returns (new_count, existing_count, total).
    Features without a place_id are skipped and not counted.
    """
    new_count = 0
    existing_count = 0

    for feature in features:
        place_id = None
        try:
            props = feature.get("properties") or {}
            place_id = props.get("place_id")
            if not place_id:
                continue

            existing = db.query(Client.id).filter(Client.place_id == place_id).first()
            if existing:
                existing_count += 1
                continue

            db.add(Client(**map_place(feature, category)))
            db.commit()
            new_count += 1

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"    ❌ Could not store place {place_id}: {e}")

        except Exception as e:
            # Malformed feature payload
            db.rollback()
            logger.error(f"    ❌ Skipping malformed place {place_id}: {e!r}")

    return new_count, existing_count, new_count + existing_count


# ══════════════════════════════════════════════════════════════════════════════
# LOCATION LOOP
# ══════════════════════════════════════════════════════════════════════════════

def _fetch_location(db, client: GeoapifyClient, category: str, location: dict,
                    radius, batch_size: int, max_batches: int, delay: float) -> dict:
    counts = {"total": 0, "new": 0, "existing": 0, "batches": 0}
    offset = 0
    has_more = True

    while has_more and counts["batches"] < max_batches:
        try:
            features = client.fetch_places(
                category, location["lat"], location["lon"], radius, batch_size, offset
            )
            if not features:
                break

            new_count, existing_count, total = store_places(db, features, category)
            counts["total"] += total
            counts["new"] += new_count
            counts["existing"] += existing_count

            logger.info(
                f"    Batch {counts['batches'] + 1}: {new_count} new, {existing_count} existing"
            )

            offset += batch_size
            counts["batches"] += 1
            has_more = len(features) == batch_size

            # Small polite delay between batches (Geoapify rate limits)
            if delay:
                time.sleep(delay)

        except AppError as e:
            logger.error(f"    ❌ Error in batch {counts['batches'] + 1}: {e.message}")
            has_more = False

        except Exception as e:
            logger.error(f"    ❌ Unexpected error in batch {counts['batches'] + 1}: {e!r}")
            has_more = False

    logger.info(f"  ✓ {location['name']}: {counts['batches']} batches, {counts['total']} places")
    return counts


# ══════════════════════════════════════════════════════════════════════════════
# MAIN ENTRY POINTS
# ══════════════════════════════════════════════════════════════════════════════

def run_auto_fetch(
    db: Session,
    radius="25000",
    batch_size: int = 100,
    max_batches_per_category: int = 5,
    category: Optional[str] = None,
    use_multiple_locations: bool = True,
    client: Optional[GeoapifyClient] = None,
    delay: Optional[float] = None,
) -> dict:
    client = client or GeoapifyClient()
    client._require_key()
    delay = settings.AUTO_FETCH_DELAY_SECONDS if delay is None else delay

    categories = get_categories(category)
    locations = get_locations(use_multiple_locations)

    start_time = datetime.utcnow()
    job = AutomationJob(
        job_type=JOB_TYPE,
        status="running",
        started_at=start_time,
        created_at=start_time,
    )
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(f"🚀 Starting auto-fetch across {len(locations)} locations with {radius}m radius (job {job.id})")
    logger.info(f"📋 Categories: {', '.join(categories)}")

    stats = []
    grand_total = 0
    grand_new = 0

    try:
        for cat in categories:
            logger.info(f"📂 Category: {cat}")
            cat_total = cat_new = cat_existing = 0

            for location in locations:
                logger.info(f"  📍 Fetching from {location['name']}...")
                counts = _fetch_location(
                    db, client, cat, location, radius, batch_size, max_batches_per_category, delay
                )
                cat_total += counts["total"]
                cat_new += counts["new"]
                cat_existing += counts["existing"]

            stats.append({
                "category": cat,
                "total_fetched": cat_total,
                "new_clients": cat_new,
                "existing_clients": cat_existing,
                "completed": True,
            })
            grand_total += cat_total
            grand_new += cat_new
            logger.info(f"✅ {cat}: {cat_new} new clients ({cat_total} total fetched)")

    except Exception as e:
        db.rollback()
        job.status = "failed"
        job.error_message = str(e)
        job.finished_at = datetime.utcnow()
        db.commit()
        raise

    summary = {
        "total_fetched": grand_total,
        "new_clients": grand_new,
        "existing_clients": grand_total - grand_new,
        "categories_processed": len(categories),
    }

    job.status = "completed"
    job.finished_at = datetime.utcnow()
    job.result_summary = summary
    db.commit()

    elapsed = (job.finished_at - start_time).total_seconds()
    logger.info(f"🏁 Auto-fetch completed in {elapsed:.0f}s: {grand_new} new clients from {grand_total} fetched")

    return {"success": True, "job_id": job.id, "stats": stats, "summary": summary}


def run():
    """
    Scheduler / CLI entry point.

    Usage:
        python -m clients_finder.workers.places.main_worker
    """
    db: Session = SessionLocal()
    try:
        run_auto_fetch(db)
    except Exception:
        logger.error(f"💥 AUTO-FETCH CRASHED:\n{traceback.format_exc()}")
    finally:
        db.close()


# ── CLI entry ──────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    run()
