"""
Tests for the orphaned order report worker.
"""

from contextlib import asynccontextmanager

import pytest

from schoolpay.models.order import Order
from schoolpay.workers import orphaned_orders


@pytest.mark.asyncio
async def test_collect_orphaned_orders(db, monkeypatch):
    @asynccontextmanager
    async def fake_context():
        yield db
    
    monkeypatch.setattr(orphaned_orders, "get_db_context", fake_context)
    
    db.add(Order(
        school_id="S1",
        trustee_id="T1",
        student_info={"name": "Jane", "id": "STU1", "email": "jane@x.com"},
        gateway_name="PhonePe",
        custom_order_id="ORD_1_orphan123",
    ))
    await db.commit()
    
    orders = await orphaned_orders.collect_orphaned_orders()
    
    assert [o["custom_order_id"] for o in orders] == ["ORD_1_orphan123"]


def test_report_counts_orphans(monkeypatch):
    async def fake_collect(limit=orphaned_orders.REPORT_LIMIT):
        return [{"custom_order_id": "ORD_1_a"}, {"custom_order_id": "ORD_2_b"}]
    
    monkeypatch.setattr(orphaned_orders, "collect_orphaned_orders", fake_collect)
    
    result = orphaned_orders.report_orphaned_orders.run()
    
    assert result == {"success": True, "count": 2}


def test_report_with_no_orphans(monkeypatch):
    async def fake_collect(limit=orphaned_orders.REPORT_LIMIT):
        return []
    
    monkeypatch.setattr(orphaned_orders, "collect_orphaned_orders", fake_collect)
    
    assert orphaned_orders.report_orphaned_orders.run() == {"success": True, "count": 0}
