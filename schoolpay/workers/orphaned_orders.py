"""
Orphaned Order Report Worker.

Runs hourly and logs orders that were persisted but never received a
status record. Read-only: operators reconcile these by hand.
"""

import asyncio
import logging

from schoolpay.workers.celery_app import celery_app
from schoolpay.database import get_db_context
from schoolpay.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

REPORT_LIMIT = 500


async def collect_orphaned_orders(limit: int = REPORT_LIMIT) -> list[dict]:
    async with get_db_context() as db:
        service = TransactionService(db)
        return await service.list_orphaned_orders(limit=limit)


@celery_app.task(bind=True, max_retries=3)
def report_orphaned_orders(self):
    """Log the orphaned order count and their custom order ids."""
    try:
        orders = asyncio.run(collect_orphaned_orders())
    except Exception as e:
        logger.error(f"Orphaned order report failed: {e}")
        raise self.retry(exc=e, countdown=60)
    
    if orders:
        ids = ", ".join(o["custom_order_id"] for o in orders)
        logger.warning(f"{len(orders)} orders without status record: {ids}")
    else:
        logger.info("No orphaned orders")
    
    return {"success": True, "count": len(orders)}
