"""
Scheduler Module

Background job scheduler for shop housekeeping.
Uses APScheduler to run a daily low-stock scan that logs the reorder list.
"""

import os
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from autofix.services.shop_data import get_shop_data

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Configuration from environment
LOW_STOCK_CHECK_ENABLED = os.getenv("LOW_STOCK_CHECK_ENABLED", "true").lower() == "true"
LOW_STOCK_CHECK_HOUR = int(os.getenv("LOW_STOCK_CHECK_HOUR", "7"))  # 7 AM UTC daily

# Create scheduler
scheduler = AsyncIOScheduler()


async def scheduled_low_stock_check():
    """Log parts below the low-stock threshold (daily)"""
    logger.info("[Scheduler] Starting low-stock check")
    try:
        parts = await get_shop_data().get_low_stock_parts()
    except Exception as e:
        logger.error(f"[Scheduler] Low-stock check failed: {e}")
        return

    if not parts:
        logger.info("[Scheduler] Low-stock check complete: stock OK")
        return

    logger.warning(f"[Scheduler] {len(parts)} part(s) need reordering")
    for part in parts:
        logger.warning(f"  - {part.name} (SKU {part.sku or '-'}): {part.stock} in stock")


def start_scheduler():
    """Start the background scheduler"""
    if not LOW_STOCK_CHECK_ENABLED:
        logger.info("[Scheduler] Low-stock check disabled via LOW_STOCK_CHECK_ENABLED env var")
        return

    logger.info(f"[Scheduler] Starting scheduler with:")
    logger.info(f"  - Low-stock check: daily at {LOW_STOCK_CHECK_HOUR}:00 UTC")

    scheduler.add_job(
        scheduled_low_stock_check,
        CronTrigger(hour=LOW_STOCK_CHECK_HOUR, minute=0),
        id="low_stock_check",
        name="Daily Low-Stock Check",
        replace_existing=True
    )

    scheduler.start()
    logger.info("[Scheduler] Scheduler started successfully")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("[Scheduler] Scheduler stopped")
