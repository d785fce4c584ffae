"""
Transaction Service - read-only projections over Order + OrderStatus.
"""

import logging
import math
from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolpay.exceptions import ValidationError
from schoolpay.models.order import Order
from schoolpay.models.order_status import OrderStatus

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

SORTABLE_COLUMNS = {
    "created_at": Order.created_at,
    "createdAt": Order.created_at,
    "payment_time": OrderStatus.payment_time,
    "order_amount": OrderStatus.order_amount,
    "transaction_amount": OrderStatus.transaction_amount,
    "status": OrderStatus.status,
    "school_id": Order.school_id,
    "custom_order_id": Order.custom_order_id,
}


def _projection() -> Select:
    """Order left-joined with its status; status columns are None for orphans."""
    return select(
        Order.id.label("collect_id"),
        Order.custom_order_id,
        Order.school_id,
        Order.gateway_name.label("gateway"),
        Order.student_info,
        OrderStatus.order_amount,
        OrderStatus.transaction_amount,
        OrderStatus.status,
        OrderStatus.payment_mode,
        OrderStatus.payment_message,
        OrderStatus.payment_time,
        OrderStatus.error_message,
        Order.created_at,
    ).outerjoin(OrderStatus, OrderStatus.collect_id == Order.id)


def _row_to_dict(row) -> dict:
    item = dict(row._mapping)
    item["collect_id"] = str(item["collect_id"])
    return item


def _check_paging(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("page must be >= 1", detail=[{"field": "page", "message": "must be >= 1"}])
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(
            f"limit must be between 1 and {MAX_PAGE_SIZE}",
            detail=[{"field": "limit", "message": f"must be between 1 and {MAX_PAGE_SIZE}"}],
        )


class TransactionService:
    """Paginated transaction listings and status lookups."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list_transactions(
        self,
        page: int = 1,
        limit: int = 10,
        sort: str = "created_at",
        order: str = "desc",
    ) -> dict:
        """All transactions, sorted by a whitelisted column."""
        _check_paging(page, limit)
        
        column = SORTABLE_COLUMNS.get(sort)
        if column is None:
            raise ValidationError(
                f"Cannot sort by {sort}",
                detail=[{"field": "sort", "message": f"one of {sorted(SORTABLE_COLUMNS)}"}],
            )
        if order not in ("asc", "desc"):
            raise ValidationError(
                f"Invalid sort order {order}",
                detail=[{"field": "order", "message": "asc or desc"}],
            )
        
        ordering = column.desc() if order == "desc" else column.asc()
        query = (
            _projection()
            .order_by(ordering, Order.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        
        result = await self.db.execute(query)
        total = await self.db.scalar(select(func.count()).select_from(Order))
        
        return self._page([_row_to_dict(r) for r in result], total or 0, page, limit)
    
    async def list_by_school(
        self,
        school_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        """Transactions for one school, newest first."""
        _check_paging(page, limit)
        
        query = (
            _projection()
            .where(Order.school_id == school_id)
            .order_by(Order.created_at.desc(), Order.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        
        result = await self.db.execute(query)
        total = await self.db.scalar(
            select(func.count()).select_from(Order).where(Order.school_id == school_id)
        )
        
        return self._page([_row_to_dict(r) for r in result], total or 0, page, limit)
    
    async def get_transaction_status(self, custom_order_id: str) -> Optional[dict]:
        """Joined order/status projection for one custom order id, or None."""
        # TODO: poll the gateway's collect-request status endpoint once the
        # gateway's collect_request_id is stored on Order.
        result = await self.db.execute(
            _projection().where(Order.custom_order_id == custom_order_id)
        )
        row = result.first()
        return _row_to_dict(row) if row else None
    
    async def list_orphaned_orders(self, limit: int = 100) -> list[dict]:
        """
        Orders that never got a status record.
        
        These come from creation calls that failed after the Order was
        persisted (missing credentials, gateway error). Oldest first.
        """
        result = await self.db.execute(
            select(Order)
            .outerjoin(OrderStatus, OrderStatus.collect_id == Order.id)
            .where(OrderStatus.id.is_(None))
            .order_by(Order.created_at.asc())
            .limit(limit)
        )
        return [
            {
                "order_id": str(o.id),
                "custom_order_id": o.custom_order_id,
                "school_id": o.school_id,
                "gateway_name": o.gateway_name,
                "created_at": o.created_at,
            }
            for o in result.scalars()
        ]
    
    @staticmethod
    def _page(transactions: list[dict], total: int, page: int, limit: int) -> dict:
        return {
            "transactions": transactions,
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit) if total else 0,
        }
