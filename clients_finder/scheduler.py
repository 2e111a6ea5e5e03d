import logging
from apscheduler.schedulers.background import BackgroundScheduler

from clients_finder.core.config import settings

# --- WORKERS ---
from clients_finder.workers.places.main_worker import run as run_auto_fetch

logger = logging.getLogger(__name__)
scheduler = BackgroundScheduler()


# ---------------------------------------------------------
# SCHEDULER SETUP
# ---------------------------------------------------------
def start_scheduler():
    if scheduler.running:
        return

    interval = settings.AUTO_FETCH_INTERVAL_HOURS
    if interval <= 0:
        logger.info("⏸️ Periodic auto-fetch disabled (AUTO_FETCH_INTERVAL_HOURS=0).")
        return

    # Places discovery
    scheduler.add_job(
        run_auto_fetch,
        "interval",
        hours=interval,
        id="places_auto_fetch",
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    logger.info(f"🚀 Background Scheduler Started (auto-fetch every {interval}h).")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
