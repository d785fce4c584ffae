"""
Admin reconciliation endpoints.
"""

import logging

from fastapi import APIRouter, Depends, Query

from schoolpay.api.deps import get_transaction_service, verify_admin_key
from schoolpay.services.transaction_service import TransactionService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/orphaned-orders", dependencies=[Depends(verify_admin_key)])
async def list_orphaned_orders(
    limit: int = Query(100, ge=1, le=1000),
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Orders persisted without a status record.
    PROTECTED: Requires X-Admin-Key header.
    """
    orders = await service.list_orphaned_orders(limit=limit)
    logger.info(f"Orphaned order query returned {len(orders)} orders")
    return {
        "count": len(orders),
        "orders": orders,
    }
