"""
Background simulator feeding Firebase with synthetic readings
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
import logging
import asyncio
import time
from typing import Optional

from hydromon.config import Settings
from hydromon.providers.firebase_provider import FirebaseProvider, provider_from_settings
from hydromon.services.simulator import generate_random_reading

logger = logging.getLogger(__name__)
scheduler = BackgroundScheduler()

async def push_simulated_reading(provider: FirebaseProvider, to_history: bool = False, now: Optional[int] = None) -> dict:
    """Write one random reading to RTDB and, optionally, append it to Firestore"""
    data = generate_random_reading(provider.profile, now=now)
    await provider.put_realtime_snapshot(data)
    if to_history:
        await provider.write_history_document(str(data["timestamp"]), data)
    return data

def _run_job(settings: Settings, to_history: bool):
    # each job runs on its own worker thread, so it gets a private event loop
    provider = provider_from_settings(settings)
    try:
        data = asyncio.run(push_simulated_reading(provider, to_history=to_history, now=int(time.time())))
        target = "RTDB + Firestore" if to_history else "RTDB"
        logger.debug(f"Simulated reading sent to {target}: {data}")
    except Exception as e:
        logger.error(f"Error sending simulated reading: {str(e)}")

def start_scheduler(settings: Settings):
    """Start the simulator jobs (no-op unless enabled in settings)"""
    if not settings.simulator_enabled:
        logger.info("Simulator disabled, scheduler not started")
        return

    if not scheduler.running:
        scheduler.add_job(
            _run_job,
            IntervalTrigger(seconds=settings.simulator_rtdb_interval_seconds),
            args=[settings, False],
            id="simulator_rtdb",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.add_job(
            _run_job,
            IntervalTrigger(seconds=settings.simulator_firestore_interval_seconds),
            args=[settings, True],
            id="simulator_firestore",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        logger.info(
            f"Simulator scheduler started (RTDB every {settings.simulator_rtdb_interval_seconds}s, "
            f"Firestore every {settings.simulator_firestore_interval_seconds}s)"
        )

def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Simulator scheduler stopped")
