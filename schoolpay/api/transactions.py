"""
Transaction listing and status endpoints.
"""

from fastapi import APIRouter, Depends, Query

from schoolpay.api.deps import get_transaction_service, verify_api_key
from schoolpay.services.transaction_service import TransactionService

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.get("/transactions")
async def list_transactions(
    page: int = Query(1),
    limit: int = Query(10),
    sort: str = Query("created_at"),
    order: str = Query("desc"),
    service: TransactionService = Depends(get_transaction_service),
):
    """All transactions with their latest status."""
    return await service.list_transactions(page=page, limit=limit, sort=sort, order=order)


@router.get("/transactions/school/{school_id}")
async def list_school_transactions(
    school_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.list_by_school(school_id, page=page, limit=limit)


@router.get("/transaction-status/{custom_order_id}")
async def get_transaction_status(
    custom_order_id: str,
    service: TransactionService = Depends(get_transaction_service),
):
    """Order + status projection, or null when the id is unknown."""
    return await service.get_transaction_status(custom_order_id)
